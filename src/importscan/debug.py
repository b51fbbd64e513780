"""--tokens and --debug dumps to stderr."""

from __future__ import annotations

import sys
from typing import TextIO

from importscan.dependency import Dependency, Diagnostic
from importscan.lexer import LexIssue
from importscan.tokens import Token, TokenKind


def dump_tokens(tokens: list[Token], *, file: TextIO | None = None) -> None:
    """Print one line per token: position, kind, and lexeme or string value."""
    if file is None:
        file = sys.stderr
    for tok in tokens:
        file.write(f"{tok.line}:{tok.column} {tok.kind.name}{_token_detail(tok)}\n")


def _token_detail(tok: Token) -> str:
    if tok.kind == TokenKind.STRING:
        return f" {tok.value!r}"
    if tok.kind == TokenKind.IDENTIFIER:
        return f" {tok.lexeme}"
    return ""


def dump_issues(issues: list[LexIssue], *, file: TextIO | None = None) -> None:
    if file is None:
        file = sys.stderr
    for issue in issues:
        file.write(
            f"{issue.line} {issue.kind.name} "
            f"[{issue.span.start}:{issue.span.end}] {issue.message}\n"
        )


def dump_results(results: list[Dependency | Diagnostic], *, file: TextIO | None = None) -> None:
    """Print dependencies and diagnostics in source order."""
    if file is None:
        file = sys.stderr
    for result in results:
        if isinstance(result, Dependency):
            form = result.form.value if result.form is not None else "?"
            file.write(f"{result.line} Dependency {result.specifier!r} ({form})\n")
        else:
            file.write(f"{result.line} Diagnostic {result.message}\n")
