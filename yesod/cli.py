import argparse
import importlib
import json
import os
import sys

from .errors import DSLSyntaxError, ValidationFailed, YesodError


def _read_source(args) -> str:
    if args.file:
        with open(args.file, encoding="utf-8") as f:
            return f.read()
    if args.command:
        return args.command
    return sys.stdin.read()


def load_app(target: str):
    """Import a host Yesod instance from "package.module:attribute" """
    from .app import Yesod

    module_name, _, attribute = target.partition(":")
    if not module_name or not attribute:
        raise ValueError(f"Expected MODULE:ATTRIBUTE, got {target!r}")
    # Host modules usually live in the working directory
    if os.getcwd() not in sys.path:
        sys.path.insert(0, os.getcwd())
    app = getattr(importlib.import_module(module_name), attribute)
    if not isinstance(app, Yesod):
        raise TypeError(f"{target} is {type(app).__name__}, not Yesod")
    return app


def _resolve_app(args):
    from .config import get_settings

    target = args.app or get_settings().app
    if not target:
        print("Error: no host given; use --app MODULE:ATTR or set YESOD_APP", file=sys.stderr)
        return None
    try:
        return load_app(target)
    except (ImportError, AttributeError, ValueError, TypeError) as e:
        print(f"Error: cannot load {target}: {e}", file=sys.stderr)
        return None


def _parse(args) -> int:
    """Print parsed statements as JSON"""
    from .parser import parse

    try:
        statements = parse(_read_source(args))
    except DSLSyntaxError as e:
        print(f"Syntax error: {e}", file=sys.stderr)
        return 1

    print(json.dumps([stmt.to_dict() for stmt in statements], indent=2, ensure_ascii=False))
    return 0


def _check(args) -> int:
    """Validate statements against a host's commands"""
    from .parser import parse
    from .runner import validate_statements

    app = _resolve_app(args)
    if app is None:
        return 2

    try:
        statements = parse(_read_source(args))
    except DSLSyntaxError as e:
        print(f"Syntax error: {e}", file=sys.stderr)
        return 1

    errors = validate_statements(statements, app.registry)
    for error in errors:
        print(f"- {error}", file=sys.stderr)
    if errors:
        return 1

    print(f"OK: {len(statements)} statement(s)")
    return 0


def _run(args) -> int:
    """Run DSL against a host and print the final bindings"""
    from .resolver import stringify, to_plain

    app = _resolve_app(args)
    if app is None:
        return 2

    try:
        bindings = app.parse_and_run_sync(_read_source(args))
    except DSLSyntaxError as e:
        print(f"Syntax error: {e}", file=sys.stderr)
        return 1
    except ValidationFailed as e:
        for message in e.messages:
            print(f"- {message}", file=sys.stderr)
        return 1
    except YesodError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(json.dumps(to_plain(bindings), indent=2, ensure_ascii=False, default=stringify))
    return 0


def _commands(args) -> int:
    """Print a host's help text"""
    app = _resolve_app(args)
    if app is None:
        return 2
    app.show_help()
    return 0


def main(argv: list[str] | None = None) -> int:
    from .config import ConfigLoader
    from .log import configure_logging

    parser = argparse.ArgumentParser(
        prog="yesod", description="Yesod CLI - run registered commands from a one-line DSL"
    )
    sub = parser.add_subparsers(dest="subcommand", required=True)

    parse_cmd = sub.add_parser("parse", help="Parse DSL and print statements as JSON")
    check_cmd = sub.add_parser("check", help="Validate DSL against a host's commands")
    run_cmd = sub.add_parser("run", help="Run DSL against a host")
    commands_cmd = sub.add_parser("commands", help="List a host's commands")

    for cmd in (parse_cmd, check_cmd, run_cmd):
        cmd.add_argument("-f", "--file", help="DSL file")
        cmd.add_argument("-c", "--command", help="DSL text")
    for cmd in (check_cmd, run_cmd, commands_cmd):
        cmd.add_argument("--app", help="Host Yesod instance as MODULE:ATTR")

    args = parser.parse_args(argv)

    # .env, .env.local and .env.<YESOD_ENV> from the working directory
    settings = ConfigLoader().load()
    configure_logging(settings.name, settings.log_level, settings.log_format)

    if args.subcommand == "parse":
        return _parse(args)
    if args.subcommand == "check":
        return _check(args)
    if args.subcommand == "run":
        return _run(args)
    if args.subcommand == "commands":
        return _commands(args)

    return 2


if __name__ == "__main__":
    raise SystemExit(main())
