"""Import/export dependency scanner for JavaScript/TypeScript-like sources."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from importscan.dependency import Dependency
    from importscan.parser import ParseOptions

__version__ = "0.1.0"


def find_dependencies(
    source: str,
    name: str = "<input>",
    options: ParseOptions | None = None,
) -> list[Dependency]:
    """Lex and parse source text, returning the dependencies it declares."""
    from importscan.lexer import lex
    from importscan.parser import parse

    return parse(lex(name, source), options)
