"""
Yesod - drive registered commands from a one-line Lisp-like DSL

    cfg:(get-config env:prod) (deploy api config:$cfg)

Host API:
    from yesod import Yesod
    yesod = Yesod("banana")
    yesod.register("deploy", CommandDefinition(action=deploy))
    await yesod.run(sys.argv[1:])
"""

__version__ = "0.1.0"

from .app import Yesod, create_yesod
from .config import Settings, get_settings
from .errors import (
    ActionError,
    DSLSyntaxError,
    IssueKind,
    UndefinedVariable,
    ValidationFailed,
    ValidationIssue,
    YesodError,
)
from .grammar import NodeKind, SyntaxNode, parse_tree
from .log import configure_logging, get_logger
from .parser import (
    Assignment,
    Command,
    CommandStatement,
    Literal,
    Statement,
    VariableRef,
    parse,
)
from .registry import CommandDefinition, CommandRegistry
from .resolver import ResolvedArgs, resolve_command_args, stringify
from .runner import (
    ExecutionResult,
    ValidationReport,
    check_statements,
    execute_statements,
    log_execution_summary,
    validate_statements,
)
from .utils import format_duration, run_and_measure, with_dir

__all__ = [
    "ActionError",
    "Assignment",
    "Command",
    "CommandDefinition",
    "CommandRegistry",
    "CommandStatement",
    "DSLSyntaxError",
    "ExecutionResult",
    "IssueKind",
    "Literal",
    "NodeKind",
    "ResolvedArgs",
    "Settings",
    "Statement",
    "SyntaxNode",
    "UndefinedVariable",
    "ValidationFailed",
    "ValidationIssue",
    "ValidationReport",
    "VariableRef",
    "Yesod",
    "YesodError",
    "check_statements",
    "configure_logging",
    "create_yesod",
    "execute_statements",
    "format_duration",
    "get_logger",
    "get_settings",
    "log_execution_summary",
    "parse",
    "parse_tree",
    "resolve_command_args",
    "run_and_measure",
    "stringify",
    "validate_statements",
    "with_dir",
]
