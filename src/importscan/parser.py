"""importscan parser: walks a token stream and collects import/export dependencies."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from importscan.dependency import Dependency, Diagnostic
from importscan.errors import ParseError
from importscan.grammar import Form, Step, describe_alternatives, forms_for
from importscan.tokens import Source, Span, Token, TokenKind

logger = logging.getLogger(__name__)


class RecoveryPolicy(Enum):
    """What to do with a token that cannot start a statement."""

    SCAN = "scan"  # skip silently until the next 'import'/'export'
    SKIP = "skip"  # report a diagnostic, skip one token, retry


@dataclass(frozen=True, slots=True)
class ParseOptions:
    recovery: RecoveryPolicy = RecoveryPolicy.SCAN
    extended_forms: bool = False


Result = Dependency | Diagnostic

_STATEMENT_START: frozenset[TokenKind] = frozenset({TokenKind.IMPORT, TokenKind.EXPORT})


class Parser:
    """Predictive recursive descent over the grammar table in importscan.grammar."""

    def __init__(self, tokens: list[Token], options: ParseOptions | None = None) -> None:
        self._tokens = _terminated(tokens)
        self._options = options or ParseOptions()
        self._pos = 0

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    def _peek(self, offset: int = 0) -> Token:
        idx = self._pos + offset
        if idx < len(self._tokens):
            return self._tokens[idx]
        return self._tokens[-1]  # EOF

    def _at(self, *kinds: TokenKind) -> bool:
        return self._peek().kind in kinds

    def _at_eof(self) -> bool:
        return self._peek().kind == TokenKind.EOF

    def _advance(self) -> Token:
        tok = self._peek()
        if tok.kind != TokenKind.EOF:
            self._pos += 1
        return tok

    def _expect(self, kind: TokenKind, message: str) -> Token:
        tok = self._peek()
        if tok.kind != kind:
            raise ParseError(f"{message}, found {tok.describe()}", tok)
        return self._advance()

    # ------------------------------------------------------------------
    # Top level
    # ------------------------------------------------------------------

    def parse(self) -> list[Result]:
        results: list[Result] = []

        while not self._at_eof():
            if self._at(*_STATEMENT_START):
                try:
                    results.append(self._parse_statement())
                except ParseError as exc:
                    results.append(Diagnostic(exc.token, exc.message))
                continue

            tok = self._advance()
            if self._options.recovery == RecoveryPolicy.SKIP:
                results.append(
                    Diagnostic(tok, f"expected 'import' or 'export', found {tok.describe()}")
                )

        return results

    # ------------------------------------------------------------------
    # Statements
    # ------------------------------------------------------------------

    def _parse_statement(self) -> Dependency:
        keyword = self._advance()
        forms = forms_for(keyword.kind, self._options.extended_forms)

        for form in forms:
            if self._matches(form.prefix):
                return self._parse_form(form, keyword)

        raise ParseError(
            f"expected {describe_alternatives(forms)} after {keyword.kind.label}, "
            f"found {self._peek().describe()}",
            self._peek(),
        )

    def _matches(self, prefix: tuple[TokenKind, ...]) -> bool:
        return all(self._peek(i).kind == kind for i, kind in enumerate(prefix))

    def _parse_form(self, form: Form, keyword: Token) -> Dependency:
        path: Token | None = None
        prev = keyword

        for step in form.steps:
            if step is Step.SKIP_TO_RBRACE:
                # Bound names are not inspected
                while not self._at(TokenKind.RBRACE, TokenKind.EOF):
                    prev = self._advance()
            elif step is Step.PATH:
                prev = path = self._expect(
                    TokenKind.STRING, f"expected module path string after {prev.describe()}"
                )
            else:
                prev = self._expect(step, f"expected {step.label} after {prev.describe()}")

        assert path is not None, f"grammar form {form.form} has no path step"
        return Dependency(path, form.form)


def _terminated(tokens: list[Token]) -> list[Token]:
    """Return tokens ending in EOF, appending a synthetic one when missing."""
    tokens = list(tokens)
    if tokens and tokens[-1].kind == TokenKind.EOF:
        return tokens
    if tokens:
        last = tokens[-1]
        end = last.span.end
        tokens.append(Token(TokenKind.EOF, Span(end, end), last.line, last.source))
    else:
        tokens.append(Token(TokenKind.EOF, Span(0, 0), 1, Source("<empty>", "")))
    return tokens


def parse_results(tokens: list[Token], options: ParseOptions | None = None) -> list[Result]:
    """Parse tokens into dependencies and diagnostics, in source order."""
    return Parser(tokens, options).parse()


def parse(tokens: list[Token], options: ParseOptions | None = None) -> list[Dependency]:
    """Parse tokens into dependencies, logging each diagnostic as a warning."""
    deps: list[Dependency] = []
    for result in parse_results(tokens, options):
        if isinstance(result, Diagnostic):
            tok = result.token
            logger.warning(
                "parse error at %s:%d:%d: %s",
                tok.source.name,
                tok.line,
                tok.column,
                result.message,
            )
        else:
            deps.append(result)
    return deps
