"""
Command Registry - named command definitions and help text
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

logger = logging.getLogger(__name__)

# action(positional_args, named_args) -> result, sync or async
CommandAction = Callable[[list[str], dict[str, str]], Any]


@dataclass
class CommandDefinition:
    """A command action plus the metadata shown in --help"""

    action: CommandAction
    description: str | None = None
    # Example: ["REQUIRED env: The environment (staging/production)"]
    args_description: list[str] = field(default_factory=list)
    # If set, the result must be assigned to a variable
    returns: str | None = None


class CommandRegistry:
    """Name -> CommandDefinition, in registration order"""

    def __init__(self, log: logging.Logger | logging.LoggerAdapter | None = None):
        self._commands: dict[str, CommandDefinition] = {}
        self.logger = log or logger

    def register(self, name: str, definition: CommandDefinition) -> None:
        if name in self._commands:
            self.logger.warning(f"Overwriting existing command: {name}")
        self._commands[name] = definition

    def command(
        self,
        name: str,
        description: str | None = None,
        args_description: list[str] | None = None,
        returns: str | None = None,
    ) -> Callable[[CommandAction], CommandAction]:
        """
        Decorator form of register()

        @registry.command("deploy", description="Deploy a service")
        async def deploy(positional, named):
            ...
        """

        def decorator(action: CommandAction) -> CommandAction:
            self.register(
                name,
                CommandDefinition(
                    action=action,
                    description=description,
                    args_description=list(args_description or []),
                    returns=returns,
                ),
            )
            return action

        return decorator

    def get(self, name: str) -> CommandDefinition | None:
        return self._commands.get(name)

    def commands(self) -> dict[str, CommandDefinition]:
        """Shallow copy of all registered commands"""
        return dict(self._commands)

    def names(self) -> list[str]:
        return list(self._commands)

    def __contains__(self, name: object) -> bool:
        return name in self._commands

    def __len__(self) -> int:
        return len(self._commands)

    def render_help(self, program: str) -> str:
        """Help text listing every command with its arguments and return contract"""
        lines = [
            f"Usage: ./{program}/x <command1> [arg1:value] [arg2:value] <command2> ...",
            "",
            "Available commands:",
        ]
        for name, definition in self._commands.items():
            lines.append(f"  {name}")
            if definition.description:
                lines.append(f"    {definition.description}")
            if definition.args_description:
                lines.append("    ARGUMENTS:")
                lines.extend(f"    * {arg}" for arg in definition.args_description)
            if definition.returns:
                lines.append(f"    RETURNS: {definition.returns}")
        return "\n".join(lines)
