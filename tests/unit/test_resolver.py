"""
Argument resolution tests
"""

from dataclasses import dataclass

import pytest
from pydantic import BaseModel

from yesod.errors import UndefinedVariable
from yesod.parser import Command, Literal, VariableRef
from yesod.resolver import ResolvedArgs, resolve_argument, resolve_command_args, stringify


class Endpoint(BaseModel):
    host: str
    port: int


@dataclass
class Release:
    version: str
    stable: bool


# =============================================================================
# resolve_command_args
# =============================================================================


class TestResolveCommandArgs:
    """Literal and variable resolution"""

    def test_literals_resolve_to_themselves(self):
        command = Command(
            "test",
            [Literal("hello"), Literal("world")],
            {"key": Literal("value")},
        )

        result = resolve_command_args({}, command)

        assert result == ResolvedArgs(["hello", "world"], {"key": "value"})

    def test_variable_references_resolve_from_bindings(self):
        bindings = {"myVar": "/path/to/config"}
        command = Command("test", [VariableRef("myVar")], {"config": VariableRef("myVar")})

        result = resolve_command_args(bindings, command)

        assert result.positional == ["/path/to/config"]
        assert result.named == {"config": "/path/to/config"}

    def test_undefined_variable(self):
        command = Command("test", named_args={"config": VariableRef("missing")})

        with pytest.raises(UndefinedVariable, match="Variable 'missing' is not defined") as exc:
            resolve_command_args({}, command)
        assert exc.value.name == "missing"

    def test_none_value_is_still_bound(self):
        assert resolve_argument({"x": None}, VariableRef("x")) == "null"

    def test_bindings_are_not_mutated(self):
        bindings = {"a": {"k": 1}}
        resolve_command_args(bindings, Command("t", [VariableRef("a")]))
        assert bindings == {"a": {"k": 1}}

    def test_unknown_argument_type(self):
        with pytest.raises(TypeError):
            resolve_argument({}, "raw string")


# =============================================================================
# stringify
# =============================================================================


class TestStringify:
    """Explicit value -> argument string conversion"""

    def test_strings_pass_through(self):
        assert stringify("42") == "42"
        assert stringify("") == ""

    def test_scalars(self):
        assert stringify(42) == "42"
        assert stringify(1.5) == "1.5"
        assert stringify(True) == "true"
        assert stringify(None) == "null"

    def test_mappings_are_canonical_json(self):
        assert stringify({"env": "prod"}) == '{"env":"prod"}'
        assert stringify({"b": 1, "a": [1, 2]}) == '{"a":[1,2],"b":1}'

    def test_sequences(self):
        assert stringify(["a", 1]) == '["a",1]'
        assert stringify(("a",)) == '["a"]'

    def test_pydantic_models(self):
        assert stringify(Endpoint(host="db", port=5432)) == '{"host":"db","port":5432}'

    def test_dataclasses(self):
        assert stringify(Release("1.2.3", True)) == '{"stable":true,"version":"1.2.3"}'

    def test_nested_models_inside_containers(self):
        value = {"primary": Endpoint(host="db", port=1)}
        assert stringify(value) == '{"primary":{"host":"db","port":1}}'

    def test_other_objects_use_str(self):
        class Token:
            def __str__(self):
                return "tok-123"

        assert stringify(Token()) == "tok-123"

    def test_mixed_key_types(self):
        assert stringify({1: "a", "b": 2}) == '{"1":"a","b":2}'
        assert stringify({None: 1, True: 2}) == '{"null":1,"true":2}'

    def test_non_json_keys_use_str(self):
        assert stringify({(1, 2): "x"}) == '{"(1, 2)":"x"}'

    def test_nested_mixed_keys(self):
        assert stringify([{2: "b", "a": {3: "c"}}]) == '[{"2":"b","a":{"3":"c"}}]'


def test_mixed_key_mapping_resolves_as_argument():
    command = Command("use", [], {"v": VariableRef("m")})

    resolved = resolve_command_args({"m": {1: "a", "b": 2}}, command)

    assert resolved.named == {"v": '{"1":"a","b":2}'}
