"""Token kinds, source buffers, spans, and character classification helpers."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class TokenKind(Enum):
    # Punctuation (single-character)
    LPAREN = "'('"
    RPAREN = "')'"
    LBRACE = "'{'"
    RBRACE = "'}'"
    COMMA = "','"
    SEMICOLON = "';'"
    STAR = "'*'"

    # Literals
    IDENTIFIER = "identifier"
    STRING = "string literal"  # value is the text between the quotes

    # Keywords
    IMPORT = "'import'"
    EXPORT = "'export'"
    FROM = "'from'"
    AS = "'as'"
    TYPE = "'type'"

    EOF = "end of input"

    @property
    def label(self) -> str:
        """Human-readable name used in diagnostics."""
        return self.value


@dataclass(frozen=True, slots=True)
class Source:
    """A named, immutable source buffer shared by every token lexed from it.

    Equality and hashing use the name only, so two buffers with the same
    name compare equal even when their text differs.
    """

    name: str
    text: str = field(compare=False, repr=False)

    def __len__(self) -> int:
        return len(self.text)

    def slice(self, span: Span) -> str:
        """Return the text covered by *span*."""
        if span.end > len(self.text):
            raise ValueError(
                f"span {span.start}..{span.end} exceeds source {self.name!r} "
                f"of length {len(self.text)}"
            )
        return self.text[span.start : span.end]

    def location(self, offset: int) -> tuple[int, int]:
        """Return the 1-based (line, column) of a character offset."""
        offset = max(0, min(offset, len(self.text)))
        line = self.text.count("\n", 0, offset) + 1
        line_start = self.text.rfind("\n", 0, offset) + 1
        return line, offset - line_start + 1


@dataclass(frozen=True, slots=True)
class Span:
    """Half-open range of character offsets into one Source."""

    start: int
    end: int

    def __post_init__(self) -> None:
        if self.start < 0 or self.end < self.start:
            raise ValueError(f"invalid span {self.start}..{self.end}")


@dataclass(frozen=True, slots=True)
class Token:
    """A lexer token. The raw text stays in the shared Source."""

    kind: TokenKind
    span: Span
    line: int
    source: Source
    value: str | None = None

    @property
    def lexeme(self) -> str:
        return self.source.slice(self.span)

    @property
    def column(self) -> int:
        return self.source.location(self.span.start)[1]

    def describe(self) -> str:
        """Describe the token for a diagnostic message."""
        if self.kind == TokenKind.IDENTIFIER:
            return f"identifier '{self.lexeme}'"
        if self.kind == TokenKind.STRING:
            return f"string {self.value!r}"
        return self.kind.label


KEYWORDS: dict[str, TokenKind] = {
    "import": TokenKind.IMPORT,
    "export": TokenKind.EXPORT,
    "as": TokenKind.AS,
    "from": TokenKind.FROM,
    "type": TokenKind.TYPE,
}

PUNCTUATION: dict[str, TokenKind] = {
    "(": TokenKind.LPAREN,
    ")": TokenKind.RPAREN,
    "{": TokenKind.LBRACE,
    "}": TokenKind.RBRACE,
    ",": TokenKind.COMMA,
    ";": TokenKind.SEMICOLON,
    "*": TokenKind.STAR,
}

QUOTES = frozenset("\"'`")


def keyword_or_identifier(text: str) -> TokenKind:
    """Classify an identifier-shaped lexeme, falling back to IDENTIFIER."""
    return KEYWORDS.get(text, TokenKind.IDENTIFIER)


def is_ident_start(ch: str) -> bool:
    """Return True if ch can start an identifier ('_' and '$' cannot)."""
    return ch.isalpha()


def is_ident_char(ch: str) -> bool:
    """Return True if ch can continue an identifier."""
    return ch.isalnum()
