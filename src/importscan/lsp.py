"""Minimal LSP server for importscan: diagnostics only."""

from __future__ import annotations

from lsprotocol.types import (
    TEXT_DOCUMENT_DID_CHANGE,
    TEXT_DOCUMENT_DID_OPEN,
    Diagnostic,
    DiagnosticSeverity,
    DidChangeTextDocumentParams,
    DidOpenTextDocumentParams,
    Position,
    PublishDiagnosticsParams,
    Range,
    TextDocumentSyncKind,
)
from pygls.lsp.server import LanguageServer

from importscan import __version__
from importscan.dependency import Diagnostic as ParseDiagnostic
from importscan.lexer import IssueKind, Lexer
from importscan.parser import ParseOptions, parse_results
from importscan.tokens import Source, Span

server = LanguageServer(
    "importscan-lsp", __version__, text_document_sync_kind=TextDocumentSyncKind.Full
)

OPTIONS = ParseOptions(extended_forms=True)


def _position(source: Source, offset: int) -> Position:
    """Convert a character offset to a 0-based LSP position in UTF-16 code units."""
    line, col = source.location(offset)
    line_start = offset - (col - 1)
    prefix = source.text[line_start:offset]
    return Position(line=line - 1, character=len(prefix.encode("utf-16-le")) // 2)


def _range(source: Source, span: Span) -> Range:
    """Convert a character span to a 0-based LSP range."""
    return Range(start=_position(source, span.start), end=_position(source, span.end))


def _validate(ls: LanguageServer, uri: str) -> None:
    """Lex and parse the document and publish diagnostics."""
    doc = ls.workspace.get_text_document(uri)
    filename = uri.rsplit("/", 1)[-1] if "/" in uri else uri
    source = Source(filename, doc.source)
    diagnostics: list[Diagnostic] = []

    lexer = Lexer(source)
    tokens = lexer.tokenize()

    for issue in lexer.issues:
        if issue.kind != IssueKind.UNTERMINATED_STRING:
            continue
        diagnostics.append(
            Diagnostic(
                range=_range(source, issue.span),
                message=issue.message,
                severity=DiagnosticSeverity.Error,
                source="importscan",
            )
        )

    for result in parse_results(tokens, OPTIONS):
        if not isinstance(result, ParseDiagnostic):
            continue
        diagnostics.append(
            Diagnostic(
                range=_range(source, result.token.span),
                message=result.message,
                severity=DiagnosticSeverity.Warning,
                source="importscan",
            )
        )

    ls.text_document_publish_diagnostics(
        PublishDiagnosticsParams(uri=uri, diagnostics=diagnostics)
    )


@server.feature(TEXT_DOCUMENT_DID_OPEN)
def did_open(ls: LanguageServer, params: DidOpenTextDocumentParams) -> None:
    _validate(ls, params.text_document.uri)


@server.feature(TEXT_DOCUMENT_DID_CHANGE)
def did_change(ls: LanguageServer, params: DidChangeTextDocumentParams) -> None:
    _validate(ls, params.text_document.uri)


def main() -> None:
    server.start_io()
