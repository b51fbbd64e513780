"""Parser result records: discovered dependencies and grammar diagnostics."""

from __future__ import annotations

from dataclasses import dataclass, field

from importscan.errors import format_context
from importscan.grammar import StatementForm
from importscan.tokens import Token


@dataclass(frozen=True, slots=True)
class Dependency:
    """A module reference, carried by the string token holding its path."""

    path: Token
    form: StatementForm | None = field(default=None, compare=False)

    @property
    def specifier(self) -> str:
        assert self.path.value is not None
        return self.path.value

    @property
    def line(self) -> int:
        return self.path.line


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """A grammar mismatch: the token found and what was expected instead."""

    token: Token
    message: str

    @property
    def line(self) -> int:
        return self.token.line

    def format(self, filename: str | None = None) -> str:
        return format_context(self.message, self.token.source, self.token.span, filename)
