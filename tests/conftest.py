"""Shared test fixtures and helpers."""

from __future__ import annotations

import pytest

from importscan.dependency import Dependency, Diagnostic
from importscan.lexer import lex as lex_source
from importscan.tokens import Source, Span, Token, TokenKind


@pytest.fixture
def lex():
    """Return a helper that tokenizes source and returns tokens (excluding EOF)."""

    def _lex(source: str) -> list[Token]:
        tokens = lex_source("test.ts", source)
        # Strip trailing EOF for convenience
        return [t for t in tokens if t.kind != TokenKind.EOF]

    return _lex


@pytest.fixture
def make_token():
    """Return a factory for hand-built tokens sharing one empty test source."""
    source = Source("for testing", "")

    def _make(kind: TokenKind, value: str | None = None) -> Token:
        return Token(kind, Span(0, 0), 1, source, value)

    return _make


def assert_kinds(tokens: list[Token], expected: list[TokenKind]) -> None:
    """Assert that the token kinds match the expected list."""
    actual = [t.kind for t in tokens]
    assert actual == expected, f"Expected {expected}, got {actual}"


def paths(results: list[Dependency | Diagnostic]) -> list[str]:
    """Return the specifiers of the dependencies among results."""
    return [r.specifier for r in results if isinstance(r, Dependency)]


def diagnostics(results: list[Dependency | Diagnostic]) -> list[Diagnostic]:
    """Return only the diagnostics among results."""
    return [r for r in results if isinstance(r, Diagnostic)]
