"""Run commands on a remote host over a single SSH session."""

from .ssh import (
    CommandFailed,
    ConnectionFailed,
    NotConnected,
    SessionConfig,
    SessionManager,
    SSHSessionError,
    create_session_manager,
    validate_ssh_key,
)

__version__ = "0.1.0"

__all__ = [
    "CommandFailed",
    "ConnectionFailed",
    "NotConnected",
    "SSHSessionError",
    "SessionConfig",
    "SessionManager",
    "create_session_manager",
    "validate_ssh_key",
]
