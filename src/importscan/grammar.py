"""Import/export grammar as a table of forms keyed on the leading tokens.

Each form is a flat sequence of steps walked by the parser. Adding a form
(for instance a default export) means adding a row to ``FORMS``; the parser
needs no new code.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto

from importscan.tokens import TokenKind


class StatementForm(Enum):
    DYNAMIC_IMPORT = "dynamic import"
    DEFAULT_IMPORT = "default import"
    DESTRUCTURED_IMPORT = "destructured import"
    NAMESPACE_IMPORT = "namespace import"
    DESTRUCTURED_EXPORT = "destructured export"
    NAMESPACE_EXPORT = "namespace export"

    # Extended forms
    SIDE_EFFECT_IMPORT = "side-effect import"
    TYPE_DEFAULT_IMPORT = "type-only default import"
    TYPE_DESTRUCTURED_IMPORT = "type-only destructured import"
    TYPE_NAMESPACE_IMPORT = "type-only namespace import"
    TYPE_DESTRUCTURED_EXPORT = "type-only destructured export"


class Step(Enum):
    PATH = auto()  # the module specifier string
    SKIP_TO_RBRACE = auto()  # any tokens up to '}' or end of input


@dataclass(frozen=True, slots=True)
class Form:
    """One grammar alternative following an 'import' or 'export' keyword."""

    form: StatementForm
    keyword: TokenKind
    steps: tuple[TokenKind | Step, ...]
    lookahead: int = 1
    extended: bool = False

    @property
    def prefix(self) -> tuple[TokenKind, ...]:
        """Token kinds that must come next for this form to be chosen."""
        return tuple(step_kind(step) for step in self.steps[: self.lookahead])


def step_kind(step: TokenKind | Step) -> TokenKind:
    """Return the token kind a matching step consumes."""
    if step is Step.PATH:
        return TokenKind.STRING
    if step is Step.SKIP_TO_RBRACE:
        raise ValueError("SKIP_TO_RBRACE cannot be used as lookahead")
    return step


_I = TokenKind.IMPORT
_E = TokenKind.EXPORT
_DESTRUCTURE = (TokenKind.LBRACE, Step.SKIP_TO_RBRACE, TokenKind.RBRACE, TokenKind.FROM, Step.PATH)
_NAMESPACE = (TokenKind.STAR, TokenKind.AS, TokenKind.IDENTIFIER, TokenKind.FROM, Step.PATH)

FORMS: tuple[Form, ...] = (
    Form(
        StatementForm.DYNAMIC_IMPORT,
        _I,
        (TokenKind.LPAREN, Step.PATH, TokenKind.RPAREN),
    ),
    Form(
        StatementForm.DEFAULT_IMPORT,
        _I,
        (TokenKind.IDENTIFIER, TokenKind.FROM, Step.PATH),
    ),
    Form(StatementForm.DESTRUCTURED_IMPORT, _I, _DESTRUCTURE),
    Form(StatementForm.NAMESPACE_IMPORT, _I, _NAMESPACE),
    Form(StatementForm.SIDE_EFFECT_IMPORT, _I, (Step.PATH,), extended=True),
    Form(
        StatementForm.TYPE_DEFAULT_IMPORT,
        _I,
        (TokenKind.TYPE, TokenKind.IDENTIFIER, TokenKind.FROM, Step.PATH),
        lookahead=2,
        extended=True,
    ),
    Form(
        StatementForm.TYPE_DESTRUCTURED_IMPORT,
        _I,
        (TokenKind.TYPE, *_DESTRUCTURE),
        lookahead=2,
        extended=True,
    ),
    Form(
        StatementForm.TYPE_NAMESPACE_IMPORT,
        _I,
        (TokenKind.TYPE, *_NAMESPACE),
        lookahead=2,
        extended=True,
    ),
    Form(StatementForm.DESTRUCTURED_EXPORT, _E, _DESTRUCTURE),
    Form(StatementForm.NAMESPACE_EXPORT, _E, _NAMESPACE),
    Form(
        StatementForm.TYPE_DESTRUCTURED_EXPORT,
        _E,
        (TokenKind.TYPE, *_DESTRUCTURE),
        lookahead=2,
        extended=True,
    ),
)


def forms_for(keyword: TokenKind, extended: bool = False) -> tuple[Form, ...]:
    """Return the candidate forms after *keyword*, in table order."""
    return tuple(
        f for f in FORMS if f.keyword == keyword and (extended or not f.extended)
    )


def describe_alternatives(forms: tuple[Form, ...]) -> str:
    """Join form names as 'a, b, or c'."""
    names = [f.form.value for f in forms]
    if len(names) <= 1:
        return "".join(names)
    if len(names) == 2:
        return f"{names[0]} or {names[1]}"
    return ", ".join(names[:-1]) + f", or {names[-1]}"
