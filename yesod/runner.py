"""
Statement Runner - validation gate and sequential executor

Example flow:
    cfg:(get-config env:prod)   -> runs get-config, binds the result to "cfg"
    (deploy config:$cfg)        -> resolves $cfg from the bindings, runs deploy
"""

import inspect
import json
import logging
import time
from contextlib import nullcontext
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .errors import ActionError, IssueKind, UndefinedVariable, ValidationFailed, ValidationIssue
from .parser import Assignment, Statement
from .registry import CommandDefinition, CommandRegistry
from .resolver import resolve_command_args
from .utils import format_duration, with_dir

logger = logging.getLogger(__name__)


# =============================================================================
# Validation
# =============================================================================


@dataclass
class ValidationReport:
    """Every problem found in one pass over the statements"""

    issues: list[ValidationIssue] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.issues

    @property
    def error_messages(self) -> list[str]:
        return [issue.message for issue in self.issues]


def check_statements(statements: list[Statement], registry: CommandRegistry) -> ValidationReport:
    """
    Check that every command exists and that every command with a
    `returns` contract is assigned to a variable. Executes nothing and
    does not look at variable references.
    """
    report = ValidationReport()

    for index, stmt in enumerate(statements):
        name = stmt.command.name
        definition = registry.get(name)

        if definition is None:
            report.issues.append(
                ValidationIssue(IssueKind.UNKNOWN_COMMAND, index, name, f"Unknown command: '{name}'")
            )
            continue

        if definition.returns and not isinstance(stmt, Assignment):
            report.issues.append(
                ValidationIssue(
                    IssueKind.MISSING_ASSIGNMENT,
                    index,
                    name,
                    f"Command '{name}' returns a value and must be assigned to a variable\n"
                    f"  Expected: varname:({name} ...) or _:({name} ...) to ignore the return value\n"
                    f"  Returns: {definition.returns}",
                )
            )

    return report


def validate_statements(statements: list[Statement], registry: CommandRegistry) -> list[str]:
    """Error messages for every invalid statement; empty means valid"""
    return check_statements(statements, registry).error_messages


# =============================================================================
# Execution
# =============================================================================


@dataclass(frozen=True)
class ExecutionResult:
    """Outcome of one successful run"""

    bindings: dict[str, Any]
    # Milliseconds per command name; a repeated command keeps its last timing
    execution_times: dict[str, float]
    total_time: float


async def execute_statements(
    statements: list[Statement],
    registry: CommandRegistry,
    bindings: dict[str, Any] | None = None,
    *,
    log: logging.Logger | logging.LoggerAdapter | None = None,
    working_dir: str | Path | None = None,
) -> ExecutionResult:
    """
    Execute statements strictly in order

    Each statement resolves its arguments against the bindings produced
    by every statement before it. Statements must have been validated.
    The first failure aborts the run.
    """
    log = log or logger
    context: dict[str, Any] = dict(bindings or {})
    execution_times: dict[str, float] = {}
    start_time = time.perf_counter()

    for index, stmt in enumerate(statements):
        command = stmt.command
        definition = registry.get(command.name)
        if definition is None:
            issue = ValidationIssue(
                IssueKind.UNKNOWN_COMMAND, index, command.name, f"Unknown command: '{command.name}'"
            )
            raise ValidationFailed([issue])

        try:
            args = resolve_command_args(context, command)
        except UndefinedVariable as e:
            raise e.at_statement(index, command.name) from None

        if isinstance(stmt, Assignment):
            log.info(f"Executing assignment: {stmt.variable_name} = {command.to_dsl()}")
        else:
            log.info(f"Executing: {command.to_dsl()}")

        cmd_start = time.perf_counter()
        scope = with_dir(working_dir) if working_dir else nullcontext()
        with scope:
            result = await _invoke(definition, args.positional, args.named, command.name, index)

        if isinstance(stmt, Assignment):
            context[stmt.variable_name] = result

        execution_times[command.name] = (time.perf_counter() - cmd_start) * 1000

    return ExecutionResult(
        bindings=context,
        execution_times=execution_times,
        total_time=(time.perf_counter() - start_time) * 1000,
    )


async def _invoke(
    definition: CommandDefinition,
    positional: list[str],
    named: dict[str, str],
    name: str,
    index: int,
) -> Any:
    try:
        result = definition.action(positional, named)
        if inspect.isawaitable(result):
            result = await result
    except Exception as e:
        raise ActionError(name, index, e) from e
    return result


def log_execution_summary(
    result: ExecutionResult, log: logging.Logger | logging.LoggerAdapter | None = None
) -> None:
    """Log humanized per-command and total execution times"""
    log = log or logger
    humanized = {cmd: format_duration(ms) for cmd, ms in result.execution_times.items()}
    log.info(f"Command execution times: {json.dumps(humanized, indent=2)}")
    log.info(f"Total execution time: {format_duration(result.total_time)}")
