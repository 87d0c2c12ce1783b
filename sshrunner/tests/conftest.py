"""Test configuration and fixtures."""

import os
from types import SimpleNamespace

import pytest

# Must be set before sshrunner.core.config builds its settings instance
os.environ["ENVIRONMENT"] = "development"
os.environ.setdefault("LOG_LEVEL", "DEBUG")

from sshrunner.ssh.manager import SessionConfig  # noqa: E402


class DummyConnection:
    """Stands in for asyncssh.SSHClientConnection."""

    def __init__(self, run_impl=None, close_error: Exception | None = None):
        self._run_impl = run_impl
        self._close_error = close_error
        self.commands: list[str] = []
        self.close_calls = 0
        self.closed = False

    async def run(self, command: str, check: bool = False):
        self.commands.append(command)
        if self._run_impl is None:
            return SimpleNamespace(stdout="", stderr="", exit_status=0)
        return await self._run_impl(command)

    def close(self) -> None:
        self.close_calls += 1
        if self._close_error is not None:
            raise self._close_error
        self.closed = True

    async def wait_closed(self) -> None:
        return


class FakeConnector:
    """Replacement for asyncssh.connect recording each call."""

    def __init__(self, connection: DummyConnection | None = None, error: Exception | None = None):
        self.connection = connection or DummyConnection()
        self.error = error
        self.calls: list[dict] = []

    async def __call__(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        return self.connection


@pytest.fixture
def session_config():
    return SessionConfig(host="h", port=22, username="u", password="p")


@pytest.fixture
def fake_connect(monkeypatch):
    """Patch asyncssh.connect with a FakeConnector and hand it to the test."""

    def install(run_impl=None, close_error: Exception | None = None, error: Exception | None = None):
        connection = DummyConnection(run_impl=run_impl, close_error=close_error)
        connector = FakeConnector(connection=connection, error=error)
        monkeypatch.setattr("sshrunner.ssh.manager.asyncssh.connect", connector)
        return connector

    return install
