"""Error types with formatted source context."""

from __future__ import annotations

from importscan.tokens import Source, Span, Token


def format_context(message: str, source: Source, span: Span, filename: str | None = None) -> str:
    """Render a message with a pointer, the offending source line, and carets."""
    start_line, col = source.location(span.start)
    end_line, end_col = source.location(span.end)

    lines = source.text.splitlines(keepends=True)
    line_idx = start_line - 1
    if 0 <= line_idx < len(lines):
        source_line = lines[line_idx].rstrip("\n").rstrip("\r")
    else:
        source_line = ""

    # Underline the full span when on one line, otherwise to end of line
    if end_line == start_line:
        underline_len = max(1, end_col - col)
    else:
        underline_len = max(1, len(source_line) - col + 1)

    pad = " " * (col - 1)
    carets = "^" * underline_len

    line_num = str(start_line)
    gutter_width = len(line_num) + 1

    blank_gutter = " " * gutter_width + "|"
    line_gutter = f"{line_num:>{gutter_width - 1}} |"

    return (
        f"error: {message}\n"
        f"{' ' * gutter_width}--> {filename or source.name}:{start_line}:{col}\n"
        f"{blank_gutter}\n"
        f"{line_gutter} {source_line}\n"
        f"{blank_gutter} {pad}{carets}"
    )


class LexError(Exception):
    """Raised in strict mode on the first unterminated string literal."""

    def __init__(self, message: str, span: Span, source: Source) -> None:
        self.message = message
        self.span = span
        self.source = source
        super().__init__(self.format())

    @property
    def line(self) -> int:
        return self.source.location(self.span.start)[0]

    def format(self, filename: str | None = None) -> str:
        return format_context(self.message, self.source, self.span, filename)


class ParseError(Exception):
    """Raised when a grammar form does not match; carries the token found."""

    def __init__(self, message: str, token: Token) -> None:
        self.message = message
        self.token = token
        super().__init__(self.format())

    def format(self, filename: str | None = None) -> str:
        return format_context(self.message, self.token.source, self.token.span, filename)
