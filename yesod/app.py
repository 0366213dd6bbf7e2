"""
Yesod - host façade

Usage:
    from yesod import Yesod

    yesod = Yesod("banana")

    @yesod.command("get-config", returns="Path to config file (string)")
    async def get_config(positional, named):
        return f"/etc/{named.get('env', 'dev')}.json"

    @yesod.command("deploy", args_description=["REQUIRED config: Config path"])
    async def deploy(positional, named):
        ...

    # ./banana/x 'cfg:(get-config env:prod)' '(deploy config:$cfg)'
    bindings = yesod.run_sync(sys.argv[1:])
"""

import asyncio
import logging
from pathlib import Path
from typing import Any

from .config import Settings, get_settings
from .errors import ValidationFailed
from .log import get_logger
from .parser import Statement, parse
from .registry import CommandDefinition, CommandRegistry
from .runner import (
    ExecutionResult,
    check_statements,
    execute_statements,
    log_execution_summary,
)

HELP_FLAGS = ("--help", "-h")


class Yesod:
    """One registry and one logger per instance; no global state"""

    def __init__(
        self,
        name: str | None = None,
        logger: logging.Logger | logging.LoggerAdapter | None = None,
        registry: CommandRegistry | None = None,
        settings: Settings | None = None,
        working_dir: str | Path | None = None,
    ):
        self.settings = settings or get_settings()
        self.name = name or self.settings.name
        self.logger = logger or get_logger(self.name)
        self.registry = registry or CommandRegistry(self.logger)
        self.working_dir = working_dir or self.settings.working_dir

    # -------------------------------------------------------------------------
    # Registry
    # -------------------------------------------------------------------------

    def register(self, name: str, definition: CommandDefinition) -> None:
        self.registry.register(name, definition)

    def command(
        self,
        name: str,
        description: str | None = None,
        args_description: list[str] | None = None,
        returns: str | None = None,
    ):
        """Decorator that registers the wrapped function as a command"""
        return self.registry.command(name, description, args_description, returns)

    def get_commands(self) -> dict[str, CommandDefinition]:
        return self.registry.commands()

    def help_text(self) -> str:
        return self.registry.render_help(self.name)

    def show_help(self) -> None:
        print(self.help_text())

    # -------------------------------------------------------------------------
    # Running
    # -------------------------------------------------------------------------

    async def run(self, args: list[str]) -> dict[str, Any]:
        """Run commands given as process arguments; prints help on -h/--help"""
        if not args or any(arg in HELP_FLAGS for arg in args):
            self.show_help()
            return {}
        return await self.parse_and_run(" ".join(args))

    async def parse_and_run(self, source: str) -> dict[str, Any]:
        """Parse, validate and execute; returns the final bindings"""
        self.logger.info(f"Parsing: {source}")
        statements = parse(source)
        self.logger.debug(f"Parsed {len(statements)} statement(s)")

        self.validate(statements)

        result = await self.execute(statements)
        if self.settings.show_timings:
            log_execution_summary(result, self.logger)
        return result.bindings

    def validate(self, statements: list[Statement]) -> None:
        """Raise ValidationFailed listing every invalid statement"""
        report = check_statements(statements, self.registry)
        if report.is_valid:
            return
        self.logger.error(f"Validation failed with {len(report.issues)} error(s):")
        for message in report.error_messages:
            self.logger.error(f"  - {message}")
        raise ValidationFailed(report.issues)

    async def execute(
        self, statements: list[Statement], bindings: dict[str, Any] | None = None
    ) -> ExecutionResult:
        return await execute_statements(
            statements,
            self.registry,
            bindings,
            log=self.logger,
            working_dir=self.working_dir,
        )

    def run_sync(self, args: list[str]) -> dict[str, Any]:
        """Synchronous version of run"""
        return asyncio.run(self.run(args))

    def parse_and_run_sync(self, source: str) -> dict[str, Any]:
        """Synchronous version of parse_and_run"""
        return asyncio.run(self.parse_and_run(source))


def create_yesod(name: str, logger: logging.Logger | logging.LoggerAdapter | None = None) -> Yesod:
    return Yesod(name, logger=logger)
