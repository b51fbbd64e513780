"""importscan lexer: converts source text into a flat token stream."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto

from importscan.errors import LexError
from importscan.tokens import (
    PUNCTUATION,
    QUOTES,
    Source,
    Span,
    Token,
    TokenKind,
    is_ident_char,
    is_ident_start,
    keyword_or_identifier,
)


class IssueKind(Enum):
    UNTERMINATED_STRING = auto()
    SKIPPED_CHARACTER = auto()  # input that is not import/export structure


@dataclass(frozen=True, slots=True)
class LexIssue:
    """Something the lexer met but produced no token for."""

    kind: IssueKind
    message: str
    span: Span
    line: int


class Lexer:
    """Tokenize source text into Token objects, keeping only import/export structure."""

    def __init__(self, source: Source, *, strict: bool = False) -> None:
        self._source = source
        self._text = source.text
        self._strict = strict
        self._start = 0
        self._start_line = 1
        self._pos = 0
        self._line = 1
        self._tokens: list[Token] = []
        self.issues: list[LexIssue] = []

    def tokenize(self) -> list[Token]:
        """Tokenize the full source and return the token list, ending with EOF."""
        while not self._at_end():
            self._start = self._pos
            self._start_line = self._line
            issue = self._scan_token()
            if issue is not None:
                self._record(issue)

        self._start = self._pos
        self._start_line = self._line
        self._emit(TokenKind.EOF)
        return self._tokens

    # ------------------------------------------------------------------
    # Position helpers
    # ------------------------------------------------------------------

    def _at_end(self) -> bool:
        return self._pos >= len(self._text)

    def _peek(self) -> str:
        if self._pos < len(self._text):
            return self._text[self._pos]
        return ""

    def _advance(self) -> str:
        ch = self._text[self._pos]
        self._pos += 1
        if ch == "\n":
            self._line += 1
        return ch

    def _current_span(self) -> Span:
        return Span(self._start, self._pos)

    def _emit(self, kind: TokenKind, value: str | None = None) -> Token:
        tok = Token(kind, self._current_span(), self._start_line, self._source, value)
        self._tokens.append(tok)
        return tok

    def _issue(self, kind: IssueKind, message: str) -> LexIssue:
        return LexIssue(kind, message, self._current_span(), self._start_line)

    def _record(self, issue: LexIssue) -> None:
        if issue.kind == IssueKind.UNTERMINATED_STRING and self._strict:
            raise LexError(issue.message, issue.span, self._source)

        # Coalesce runs of skipped characters into one issue
        if (
            issue.kind == IssueKind.SKIPPED_CHARACTER
            and self.issues
            and self.issues[-1].kind == IssueKind.SKIPPED_CHARACTER
            and self.issues[-1].span.end == issue.span.start
        ):
            prev = self.issues[-1]
            self.issues[-1] = LexIssue(
                prev.kind,
                "skipped characters",
                Span(prev.span.start, issue.span.end),
                prev.line,
            )
            return
        self.issues.append(issue)

    # ------------------------------------------------------------------
    # Scanning
    # ------------------------------------------------------------------

    def _scan_token(self) -> LexIssue | None:
        ch = self._advance()

        kind = PUNCTUATION.get(ch)
        if kind is not None:
            self._emit(kind)
            return None

        if ch in " \t\r\n":
            return None

        if ch in QUOTES:
            return self._lex_string(ch)

        if is_ident_start(ch):
            self._lex_identifier()
            return None

        return self._issue(IssueKind.SKIPPED_CHARACTER, f"skipped character {ch!r}")

    def _lex_string(self, quote: str) -> LexIssue | None:
        while not self._at_end() and self._peek() != quote:
            self._advance()

        if self._at_end():
            return self._issue(
                IssueKind.UNTERMINATED_STRING,
                f"unterminated string literal (expected closing {quote})",
            )

        self._advance()  # closing quote
        value = self._text[self._start + 1 : self._pos - 1]
        self._emit(TokenKind.STRING, value)
        return None

    def _lex_identifier(self) -> None:
        while not self._at_end() and is_ident_char(self._peek()):
            self._advance()
        text = self._text[self._start : self._pos]
        self._emit(keyword_or_identifier(text))


def lex(name: str, text: str, *, strict: bool = False) -> list[Token]:
    """Convenience function: tokenize source text and return the token list."""
    return Lexer(Source(name, text), strict=strict).tokenize()
