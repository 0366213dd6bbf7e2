"""
Yesod Parser - builds statements from the syntax tree

DSL Syntax:
-----------
// Comments start with //

// Command call with positional and named arguments
(deploy api env:prod version:"1.2.3")

// Assignment: bind the command's result to a variable
cfg:(get-config env:prod)

// Variable reference
(deploy config:$cfg)

// Namespaced command names
(server1:deploy env:prod)

// Line continuation
(build app \\
    optimize:true)
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Any

from .grammar import UNQUOTED_EXCLUDED_CHARS, NodeKind, SyntaxNode, parse_tree

logger = logging.getLogger(__name__)

ESCAPE_PATTERN = re.compile(r"\\(.)", re.DOTALL)


# =============================================================================
# AST Nodes
# =============================================================================


@dataclass
class Literal:
    """Plain string argument"""

    value: str

    def to_dsl(self) -> str:
        return quote(self.value)


@dataclass
class VariableRef:
    """$name"""

    name: str

    def to_dsl(self) -> str:
        return f"${self.name}"


ArgumentValue = Literal | VariableRef


@dataclass
class Command:
    """(name positional... key:value...)"""

    name: str
    positional_args: list[ArgumentValue] = field(default_factory=list)
    named_args: dict[str, ArgumentValue] = field(default_factory=dict)

    def to_dsl(self) -> str:
        parts = [self.name]
        parts.extend(arg.to_dsl() for arg in self.positional_args)
        parts.extend(f"{key}:{arg.to_dsl()}" for key, arg in self.named_args.items())
        return f"({' '.join(parts)})"

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "positional_args": [_argument_to_dict(arg) for arg in self.positional_args],
            "named_args": {key: _argument_to_dict(arg) for key, arg in self.named_args.items()},
        }


@dataclass
class CommandStatement:
    """Bare invocation; the result is discarded"""

    command: Command

    def to_dsl(self) -> str:
        return self.command.to_dsl()

    def to_dict(self) -> dict[str, Any]:
        return {"type": "command", "command": self.command.to_dict()}


@dataclass
class Assignment:
    """var:(command ...)"""

    variable_name: str
    command: Command

    def to_dsl(self) -> str:
        return f"{self.variable_name}:{self.command.to_dsl()}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": "assignment",
            "variable_name": self.variable_name,
            "command": self.command.to_dict(),
        }


Statement = CommandStatement | Assignment


def _argument_to_dict(arg: ArgumentValue) -> Any:
    if isinstance(arg, VariableRef):
        return {"type": "variable-ref", "name": arg.name}
    return arg.value


def quote(value: str) -> str:
    """Render a literal so that it parses back to the same value"""
    if (
        value
        and not value.startswith(('"', "//"))
        and not any(c in UNQUOTED_EXCLUDED_CHARS for c in value)
    ):
        return value
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def unescape(body: str) -> str:
    """Drop the backslash from every escape sequence"""
    return ESCAPE_PATTERN.sub(r"\1", body)


# =============================================================================
# Tree -> Statements
# =============================================================================


class StatementBuilder:
    """Build Statement objects from a `program` syntax tree"""

    def build(self, tree: SyntaxNode) -> list[Statement]:
        return [self._statement(node) for node in tree.children]

    def _statement(self, node: SyntaxNode) -> Statement:
        command = self._command(node.child(NodeKind.COMMAND))
        if node.kind == NodeKind.ASSIGNMENT:
            return Assignment(node.child(NodeKind.IDENTIFIER).text, command)
        return CommandStatement(command)

    def _command(self, node: SyntaxNode) -> Command:
        command = Command(node.child(NodeKind.COMMAND_NAME).text)

        for arg in node.children_of(NodeKind.NAMED_ARG, NodeKind.POSITIONAL_ARG):
            value = self._value(arg.children[-1])
            if arg.kind == NodeKind.POSITIONAL_ARG:
                command.positional_args.append(value)
                continue

            key = arg.child(NodeKind.IDENTIFIER).text
            if key in command.named_args:
                # Last occurrence wins
                logger.debug(
                    f"Duplicate argument '{key}' in ({command.name} ...) "
                    f"at line {arg.line}, column {arg.column}"
                )
                del command.named_args[key]
            command.named_args[key] = value

        return command

    def _value(self, node: SyntaxNode) -> ArgumentValue:
        if node.kind == NodeKind.VARIABLE_REF:
            return VariableRef(node.child(NodeKind.IDENTIFIER).text)
        if node.kind == NodeKind.QUOTED_STRING:
            return Literal(unescape(node.text[1:-1]))
        return Literal(node.text)


def parse(source: str) -> list[Statement]:
    """
    Parse DSL source into statements, in execution order

    Raises DSLSyntaxError with line/column information on malformed input.

    Example:
        parse('cfg:(get-config env:prod) (deploy config:$cfg)')
        -> [Assignment("cfg", Command("get-config", ...)),
            CommandStatement(Command("deploy", ...))]
    """
    if not source:
        return []
    statements = StatementBuilder().build(parse_tree(source))
    logger.debug(f"Parsed {len(statements)} statement(s)")
    return statements
