"""Public entrypoints for the SSH session helper."""

from typing import Optional

from sshrunner.core.config import settings

from .errors import (
    CommandFailed,
    ConnectionFailed,
    KnownHostsError,
    NotConnected,
    SSHSessionError,
)
from .keys import resolve_known_hosts, validate_ssh_key
from .manager import SessionConfig, SessionManager

__all__ = [
    "CommandFailed",
    "ConnectionFailed",
    "KnownHostsError",
    "NotConnected",
    "SSHSessionError",
    "SessionConfig",
    "SessionManager",
    "create_session_manager",
    "resolve_known_hosts",
    "validate_ssh_key",
]


def create_session_manager(
    host: str,
    username: str,
    *,
    port: int = 22,
    password: Optional[str] = None,
    private_key: Optional[str] = None,
    passphrase: Optional[str] = None,
) -> SessionManager:
    """Build a session manager whose timeouts and host verification come from settings."""
    config = SessionConfig(
        host=host,
        port=port,
        username=username,
        password=password,
        private_key=private_key,
        passphrase=passphrase,
        known_hosts=resolve_known_hosts(),
        keepalive_interval=settings.ssh_keepalive_interval,
        connect_timeout=settings.ssh_connect_timeout,
        command_timeout=settings.ssh_command_timeout,
    )
    return SessionManager(config)
