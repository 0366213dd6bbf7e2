"""
Yesod errors - one hierarchy for every failure a run can produce
Parse errors, validation errors and execution errors
"""

from dataclasses import dataclass
from enum import Enum


class YesodError(Exception):
    """Base class for all Yesod errors"""

    pass


class DSLSyntaxError(YesodError, SyntaxError):
    """Malformed DSL text"""

    def __init__(self, detail: str, line: int, column: int):
        self.detail = detail
        self.line = line
        self.column = column
        super().__init__(
            f"Failed to parse command: {detail} at line {line}, column {column}"
        )


class IssueKind(Enum):
    """Kinds of problems found by validation"""

    UNKNOWN_COMMAND = "unknown_command"
    MISSING_ASSIGNMENT = "missing_assignment"


@dataclass
class ValidationIssue:
    """A single validation problem tied to one statement"""

    kind: IssueKind
    index: int
    command_name: str
    message: str


class ValidationFailed(YesodError):
    """One or more statements failed validation; nothing was executed"""

    def __init__(self, issues: list[ValidationIssue]):
        self.issues = list(issues)
        super().__init__(
            "Validation failed: " + "; ".join(issue.message for issue in self.issues)
        )

    @property
    def messages(self) -> list[str]:
        return [issue.message for issue in self.issues]


class UndefinedVariable(YesodError):
    """A $variable was referenced before any statement assigned it"""

    def __init__(self, name: str, index: int | None = None, command_name: str | None = None):
        self.name = name
        self.index = index
        self.command_name = command_name
        message = f"Variable '{name}' is not defined"
        if command_name is not None:
            message += f" (statement {index}: {command_name})"
        super().__init__(message)

    def at_statement(self, index: int, command_name: str) -> "UndefinedVariable":
        """Copy of this error annotated with the failing statement"""
        return UndefinedVariable(self.name, index, command_name)


class ActionError(YesodError):
    """A command action raised; the original exception is chained as __cause__"""

    def __init__(self, command_name: str, index: int, error: BaseException):
        self.command_name = command_name
        self.index = index
        self.error = error
        super().__init__(
            f"Command '{command_name}' (statement {index}) failed: {error}"
        )
