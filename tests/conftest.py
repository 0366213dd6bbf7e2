"""
Shared fixtures: a recording registry and isolated settings
"""

import logging
import os
import sys
from pathlib import Path

import pytest

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from yesod.config import get_settings
from yesod.registry import CommandDefinition, CommandRegistry


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch, tmp_path):
    """No .env or YESOD_* leakage between tests"""
    for key in list(os.environ):
        if key.startswith("YESOD_"):
            monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class Recorder:
    """Collects every (command, positional, named) call in order"""

    def __init__(self):
        self.calls: list[tuple[str, list[str], dict[str, str]]] = []

    def action(self, name: str, result=None):
        async def _action(positional, named):
            self.calls.append((name, positional, named))
            return result

        return _action

    def names(self) -> list[str]:
        return [name for name, _, _ in self.calls]


@pytest.fixture
def recorder():
    return Recorder()


@pytest.fixture
def registry(recorder):
    """Registry with a few recording commands"""
    reg = CommandRegistry()
    reg.register("ping", CommandDefinition(action=recorder.action("ping")))
    reg.register("echo", CommandDefinition(action=recorder.action("echo")))
    reg.register(
        "get-value",
        CommandDefinition(action=recorder.action("get-value", "my-value"), returns="string"),
    )
    return reg


@pytest.fixture
def quiet_logger():
    log = logging.getLogger("yesod.tests")
    log.addHandler(logging.NullHandler())
    log.propagate = False
    return log
