"""Command-line interface for importscan."""

from __future__ import annotations

import argparse
import logging
import sys
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from importscan.errors import LexError
from importscan.parser import ParseOptions, RecoveryPolicy

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "importscan.toml"


@dataclass(frozen=True, slots=True)
class CliOptions:
    """Parsed CLI options."""

    input_files: list[Path]
    parse_options: ParseOptions
    strict: bool
    locations: bool
    tokens: bool
    debug: bool
    log_level: int


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser (separate function for testability)."""
    p = argparse.ArgumentParser(
        prog="importscan",
        description="List the modules imported or re-exported by JavaScript/TypeScript sources",
    )
    p.add_argument("inputs", nargs="+", metavar="FILE", help="Source file(s) to scan")
    p.add_argument(
        "--config",
        metavar="FILE",
        help=f"Config file (default: auto-discover {CONFIG_FILENAME})",
    )
    p.add_argument(
        "--recovery",
        choices=[policy.value for policy in RecoveryPolicy],
        default=None,
        help="Handling of tokens that cannot start a statement (default: scan)",
    )
    p.add_argument(
        "--extended",
        action="store_true",
        default=None,
        help="Also recognise side-effect and type-only imports/exports",
    )
    p.add_argument(
        "--strict",
        action="store_true",
        default=None,
        help="Fail on unterminated string literals",
    )
    p.add_argument(
        "--locations",
        action="store_true",
        help="Prefix each dependency with FILE:LINE:COL",
    )
    p.add_argument("--tokens", action="store_true", help="Dump the token stream to stderr")
    p.add_argument("--debug", action="store_true", help="Dump lex issues and parse results to stderr")
    verbosity = p.add_mutually_exclusive_group()
    verbosity.add_argument("-v", "--verbose", action="store_true", help="Log debug messages")
    verbosity.add_argument("-q", "--quiet", action="store_true", help="Only log errors")
    return p


def load_config(config_path: Path | None, input_dir: Path) -> dict[str, Any]:
    """Load a TOML config file, returning an empty dict on missing/absent file."""
    path = config_path if config_path is not None else input_dir / CONFIG_FILENAME

    if not path.is_file():
        return {}

    with open(path, "rb") as f:
        return tomllib.load(f)


def parse_recovery(value: object) -> RecoveryPolicy:
    """Convert a config or CLI value into a RecoveryPolicy."""
    try:
        return RecoveryPolicy(value)
    except ValueError:
        choices = ", ".join(policy.value for policy in RecoveryPolicy)
        raise argparse.ArgumentTypeError(
            f"invalid recovery policy {value!r} (expected one of: {choices})"
        ) from None


def _config_bool(section: object, key: str) -> bool | None:
    if not isinstance(section, dict) or key not in section:
        return None
    value = section[key]
    if not isinstance(value, bool):
        raise argparse.ArgumentTypeError(f"config key '{key}' must be true or false")
    return value


def resolve_options(args: argparse.Namespace) -> CliOptions:
    """Merge config file and CLI args into CliOptions.

    Precedence: defaults < config file < CLI flags.
    """
    input_files = [Path(raw) for raw in args.inputs]
    input_dir = input_files[0].parent
    if not input_dir.parts:
        input_dir = Path(".")

    config_path = Path(args.config) if args.config else None
    config = load_config(config_path, input_dir)
    cfg_lexer = config.get("lexer")
    cfg_parser = config.get("parser")

    # Strict lexing: config < CLI
    strict = False
    cfg_strict = _config_bool(cfg_lexer, "strict")
    if cfg_strict is not None:
        strict = cfg_strict
    if args.strict is not None:
        strict = args.strict

    # Recovery policy: config < CLI
    recovery = RecoveryPolicy.SCAN
    if isinstance(cfg_parser, dict) and "recovery" in cfg_parser:
        recovery = parse_recovery(cfg_parser["recovery"])
    if args.recovery is not None:
        recovery = parse_recovery(args.recovery)

    # Extended forms: config < CLI
    extended = False
    cfg_extended = _config_bool(cfg_parser, "extended_forms")
    if cfg_extended is not None:
        extended = cfg_extended
    if args.extended is not None:
        extended = args.extended

    if args.verbose:
        log_level = logging.DEBUG
    elif args.quiet:
        log_level = logging.ERROR
    else:
        log_level = logging.WARNING

    return CliOptions(
        input_files=input_files,
        parse_options=ParseOptions(recovery=recovery, extended_forms=extended),
        strict=strict,
        locations=args.locations or len(input_files) > 1,
        tokens=args.tokens,
        debug=args.debug,
        log_level=log_level,
    )


def scan_file(path: Path, options: CliOptions) -> list[str]:
    """Read, lex, and parse one file; return its output lines."""
    from importscan.debug import dump_issues, dump_results, dump_tokens
    from importscan.dependency import Dependency
    from importscan.errors import format_context
    from importscan.lexer import IssueKind, Lexer
    from importscan.parser import parse_results
    from importscan.tokens import Source

    source = Source(str(path), path.read_text(encoding="utf-8"))
    lexer = Lexer(source, strict=options.strict)
    tokens = lexer.tokenize()
    logger.debug("%s: %d tokens, %d lex issues", path, len(tokens), len(lexer.issues))

    for issue in lexer.issues:
        if issue.kind == IssueKind.UNTERMINATED_STRING:
            logger.warning("%s", format_context(issue.message, source, issue.span))

    if options.tokens:
        dump_tokens(tokens)

    results = parse_results(tokens, options.parse_options)

    if options.debug:
        dump_issues(lexer.issues)
        dump_results(results)

    lines: list[str] = []
    for result in results:
        if isinstance(result, Dependency):
            if options.locations:
                lines.append(f"{path}:{result.line}:{result.path.column}: {result.specifier}")
            else:
                lines.append(result.specifier)
        else:
            logger.warning("%s", result.format())
    return lines


def main(argv: list[str] | None = None) -> int:
    """CLI entry point. Returns exit code (0/1/2). Does not call sys.exit()."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        options = resolve_options(args)
    except (argparse.ArgumentTypeError, tomllib.TOMLDecodeError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    logging.basicConfig(level=options.log_level, format="%(levelname)s: %(message)s")

    for path in options.input_files:
        try:
            lines = scan_file(path, options)
        except LexError as exc:
            print(str(exc), file=sys.stderr)
            return 1
        except OSError as exc:
            print(f"error: cannot read {path}: {exc.strerror or exc}", file=sys.stderr)
            return 2
        except UnicodeDecodeError as exc:
            print(f"error: cannot decode {path} as UTF-8: {exc.reason}", file=sys.stderr)
            return 2
        for line in lines:
            sys.stdout.write(line + "\n")

    return 0


def entry() -> None:
    """Console-script wrapper around main()."""
    sys.exit(main())
