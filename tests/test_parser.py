"""Test the parser on hand-built token streams and on lexed source."""

from __future__ import annotations

import logging

from importscan.dependency import Dependency, Diagnostic
from importscan.grammar import StatementForm
from importscan.lexer import lex
from importscan.parser import parse, parse_results
from importscan.tokens import TokenKind

from tests.conftest import diagnostics, paths

K = TokenKind


def _results(source: str, **kwargs) -> list[Dependency | Diagnostic]:
    return parse_results(lex("test.ts", source), **kwargs)


class TestHandBuiltTokens:
    def test_dynamic_import(self, make_token):
        path = make_token(K.STRING, "./module")
        tokens = [make_token(K.IMPORT), make_token(K.LPAREN), path, make_token(K.RPAREN)]
        assert parse(tokens) == [Dependency(path)]

    def test_default_import(self, make_token):
        path = make_token(K.STRING, "./module")
        tokens = [make_token(K.IMPORT), make_token(K.IDENTIFIER), make_token(K.FROM), path]
        assert parse(tokens) == [Dependency(path)]

    def test_destructured_import_trailing_comma(self, make_token):
        path = make_token(K.STRING, "./module")
        tokens = [
            make_token(K.IMPORT),
            make_token(K.LBRACE),
            make_token(K.IDENTIFIER),
            make_token(K.COMMA),
            make_token(K.IDENTIFIER),
            make_token(K.COMMA),
            make_token(K.RBRACE),
            make_token(K.FROM),
            path,
        ]
        assert parse(tokens) == [Dependency(path)]

    def test_namespace_export_with_eof(self, make_token):
        path = make_token(K.STRING, "bar")
        tokens = [
            make_token(K.EXPORT),
            make_token(K.STAR),
            make_token(K.AS),
            make_token(K.IDENTIFIER),
            make_token(K.FROM),
            path,
            make_token(K.EOF),
        ]
        assert parse(tokens) == [Dependency(path)]

    def test_empty_token_list(self):
        assert parse([]) == []

    def test_input_list_not_mutated(self, make_token):
        tokens = [make_token(K.IMPORT), make_token(K.LPAREN)]
        parse_results(tokens)
        assert len(tokens) == 2


class TestScenarios:
    def test_default_import(self):
        assert paths(_results("import foo from 'bar'")) == ["bar"]

    def test_destructured_import(self):
        assert paths(_results('import { one, two } from "module"')) == ["module"]

    def test_destructured_import_ignores_contents(self):
        assert paths(_results("import { a as b, default as c, type D } from 'm'")) == ["m"]

    def test_namespace_import(self):
        assert paths(_results("import * as ns from 'pkg'")) == ["pkg"]

    def test_dynamic_import(self):
        assert paths(_results("import('dyn')")) == ["dyn"]

    def test_destructured_export(self):
        assert paths(_results("export {foo} from 'bar'")) == ["bar"]

    def test_namespace_export(self):
        assert paths(_results("export * as ns from 'pkg'")) == ["pkg"]

    def test_dynamic_import_with_assignment(self):
        assert paths(_results("const foo = import('bar');")) == ["bar"]

    def test_dynamic_import_with_await(self):
        assert paths(_results("await import('bar');")) == ["bar"]

    def test_empty_source(self):
        assert _results("") == []

    def test_forms_recorded(self):
        results = _results("import('a'); import b from 'b'; export * as c from 'c'")
        assert [r.form for r in results] == [
            StatementForm.DYNAMIC_IMPORT,
            StatementForm.DEFAULT_IMPORT,
            StatementForm.NAMESPACE_EXPORT,
        ]


class TestSequences:
    def test_multiple_imports(self):
        source = (
            "import first from 'first';\n"
            "import { second } from 'second'; import * as third from 'third'"
        )
        assert paths(_results(source)) == ["first", "second", "third"]

    def test_round_trip_in_source_order(self):
        specs = ["./a", "../b", "c", "@scope/d", "e/f.js"]
        statements = [
            f"import x from '{specs[0]}'",
            f'import {{ y }} from "{specs[1]}"',
            f"import * as z from `{specs[2]}`",
            f"export {{ w }} from '{specs[3]}'",
            f"export * as v from '{specs[4]}'",
        ]
        results = _results("\n\n".join(statements))
        assert paths(results) == specs
        assert diagnostics(results) == []

    def test_dependency_lines(self):
        results = _results("import a from 'a'\n\nimport('b')")
        assert [r.line for r in results] == [1, 3]

    def test_surrounding_code_ignored(self):
        source = (
            "import React from 'react';\n"
            "export function App() { return 1; }\n"
            "const lazy = () => import('./Lazy');\n"
        )
        results = _results(source)
        assert paths(results) == ["react", "./Lazy"]


class TestDiagnostics:
    def test_missing_from(self):
        results = _results("import foo 'bar'")
        [diag] = diagnostics(results)
        assert diag.message == "expected 'from' after identifier 'foo', found string 'bar'"
        assert diag.token.kind == K.STRING

    def test_no_matching_import_form(self):
        [diag] = diagnostics(_results("import ;"))
        assert diag.message.startswith(
            "expected dynamic import, default import, destructured import, "
            "or namespace import after 'import'"
        )
        assert diag.token.kind == K.SEMICOLON

    def test_no_matching_export_form(self):
        [diag] = diagnostics(_results("export default foo"))
        assert "destructured export or namespace export after 'export'" in diag.message

    def test_dynamic_import_missing_rparen(self):
        [diag] = diagnostics(_results("import('a'"))
        assert diag.message == "expected ')' after string 'a', found end of input"
        assert diag.token.kind == K.EOF

    def test_unclosed_brace_reaches_eof(self):
        [diag] = diagnostics(_results("import { a, b"))
        assert "expected '}'" in diag.message

    def test_namespace_missing_as(self):
        [diag] = diagnostics(_results("import * from 'x'"))
        assert diag.message.startswith("expected 'as' after '*'")

    def test_parsing_continues_after_error(self):
        results = _results("import foo 'bar';\nimport baz from 'qux'")
        assert paths(results) == ["qux"]
        assert len(diagnostics(results)) == 1

    def test_failed_form_leaves_keyword_for_next_statement(self):
        results = _results("import import x from 'y'")
        assert paths(results) == ["y"]
        assert len(diagnostics(results)) == 1

    def test_dependency_and_diagnostic_order(self):
        results = _results("import a from 'a'; import ; import('c')")
        assert [type(r).__name__ for r in results] == ["Dependency", "Diagnostic", "Dependency"]

    def test_diagnostic_format(self):
        [diag] = diagnostics(_results("import foo 'bar'"))
        formatted = diag.format()
        assert formatted.startswith("error: expected 'from'")
        assert "--> test.ts:1:12" in formatted
        assert "^^^^^" in formatted

    def test_type_import_rejected_without_extended_forms(self):
        results = _results("import type { A } from 'a'")
        assert paths(results) == []
        assert len(diagnostics(results)) == 1

    def test_side_effect_import_rejected_without_extended_forms(self):
        results = _results("import 'polyfill'")
        assert paths(results) == []


class TestLogging:
    def test_parse_logs_diagnostics(self, caplog):
        with caplog.at_level(logging.WARNING, logger="importscan.parser"):
            deps = parse(lex("test.ts", "import foo 'bar'; import('ok')"))
        assert [d.specifier for d in deps] == ["ok"]
        assert len(caplog.records) == 1
        assert "test.ts:1:12" in caplog.records[0].getMessage()
        assert "expected 'from'" in caplog.records[0].getMessage()

    def test_parse_results_does_not_log(self, caplog):
        with caplog.at_level(logging.WARNING, logger="importscan.parser"):
            parse_results(lex("test.ts", "import ;"))
        assert caplog.records == []
