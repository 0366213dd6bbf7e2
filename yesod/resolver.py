"""
Argument Resolver - turns literals and $variable references into plain strings
"""

import dataclasses
import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel

from .errors import UndefinedVariable
from .parser import ArgumentValue, Command, Literal, VariableRef


@dataclass
class ResolvedArgs:
    """Arguments ready to pass to a command action"""

    positional: list[str] = field(default_factory=list)
    named: dict[str, str] = field(default_factory=dict)


def stringify(value: Any) -> str:
    """
    Render a bound value as an argument string

    Strings pass through unchanged. None, booleans, numbers, mappings,
    sequences, dataclasses and pydantic models become canonical JSON
    (sorted keys, compact separators). Anything else falls back to str().
    """
    if isinstance(value, str):
        return value
    value = to_plain(value)
    if value is None or isinstance(value, (bool, int, float, Mapping, list, tuple)):
        return json.dumps(value, sort_keys=True, separators=(",", ":"), default=_json_default)
    return str(value)


def to_plain(value: Any) -> Any:
    """Convert models, dataclasses and mappings to JSON-ready builtins"""
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        value = dataclasses.asdict(value)
    if isinstance(value, Mapping):
        return {_json_key(key): to_plain(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_plain(item) for item in value]
    return value


def _json_key(key: Any) -> str:
    # Keys render as JSON would render them; other key types use str()
    if isinstance(key, str):
        return key
    if key is None or isinstance(key, (bool, int, float)):
        return json.dumps(key)
    return str(key)


def _json_default(value: Any) -> Any:
    plain = to_plain(value)
    return str(plain) if plain is value else plain


def resolve_argument(bindings: Mapping[str, Any], arg: ArgumentValue) -> str:
    """Resolve a single argument value against the current bindings"""
    if isinstance(arg, Literal):
        return arg.value
    if isinstance(arg, VariableRef):
        if arg.name not in bindings:
            raise UndefinedVariable(arg.name)
        return stringify(bindings[arg.name])
    raise TypeError(f"Unknown argument type: {arg!r}")


def resolve_command_args(bindings: Mapping[str, Any], command: Command) -> ResolvedArgs:
    """
    Resolve every argument of a command; never mutates `bindings`

    Example:
        bindings = {"cfg": "/path/to/config.json"}
        command.named_args = {"config": VariableRef("cfg")}
        -> ResolvedArgs(positional=[], named={"config": "/path/to/config.json"})
    """
    positional = [resolve_argument(bindings, arg) for arg in command.positional_args]
    named = {key: resolve_argument(bindings, arg) for key, arg in command.named_args.items()}
    return ResolvedArgs(positional, named)
