"""Exceptions raised by the SSH session helpers."""

from __future__ import annotations

from typing import Optional


class SSHSessionError(Exception):
    """Base class for session failures."""


class ConnectionFailed(SSHSessionError):
    """Raised when the SSH session cannot be established."""


class NotConnected(SSHSessionError):
    """Raised when a command is issued without an open session."""

    def __init__(self, message: str = "Not connected to SSH server") -> None:
        super().__init__(message)


class CommandFailed(SSHSessionError):
    """Raised when a remote command writes to stderr or cannot be run."""

    def __init__(
        self,
        message: str,
        *,
        command: str,
        stdout: str = "",
        stderr: str = "",
        exit_status: Optional[int] = None,
    ) -> None:
        super().__init__(message)
        self.command = command
        self.stdout = stdout
        self.stderr = stderr
        self.exit_status = exit_status


class KnownHostsError(SSHSessionError):
    """Raised when strict host verification is on but no known_hosts is usable."""
