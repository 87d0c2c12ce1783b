"""Single-host SSH session lifecycle built on top of asyncSSH."""

from __future__ import annotations

import asyncio
import inspect
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

import asyncssh

from sshrunner.core.logging import LoggerAdapter, get_logger

from .errors import CommandFailed, ConnectionFailed, NotConnected
from .keys import validate_ssh_key

logger = get_logger(__name__)

EVENTS = ("connected", "disconnected")

Listener = Callable[[], Any]


@dataclass(frozen=True, slots=True)
class SessionConfig:
    """Connection parameters for one remote host."""

    host: str
    username: str
    port: int = 22
    password: Optional[str] = field(default=None, repr=False)
    private_key: Optional[str] = field(default=None, repr=False)
    passphrase: Optional[str] = field(default=None, repr=False)
    known_hosts: Optional[str] = None
    keepalive_interval: float = 30.0
    connect_timeout: float = 10.0
    command_timeout: Optional[float] = None


def _decode_text(value: str | bytes | None) -> str:
    if value is None:
        return ""
    if isinstance(value, bytes):
        return value.decode(errors="replace")
    return str(value)


def _error_text(exc: BaseException) -> str:
    return str(exc) or "Unknown error"


class SessionManager:
    """Owns one SSH session: connect, run commands one at a time, disconnect.

    The manager never reconnects on its own. A connection that drops between
    commands is only noticed when the next command fails, and ``connected``
    stays true until :meth:`disconnect` is called.
    """

    def __init__(self, config: SessionConfig) -> None:
        self.config = config
        self._conn: Optional[asyncssh.SSHClientConnection] = None
        self._connected = False
        self._connect_lock = asyncio.Lock()
        self._command_lock = asyncio.Lock()
        self._listeners: dict[str, list[Listener]] = {event: [] for event in EVENTS}
        self._listener_tasks: set[asyncio.Future] = set()
        self._log = LoggerAdapter(
            logger,
            {
                "ssh_host": config.host,
                "ssh_port": config.port,
                "ssh_username": config.username,
            },
        )

    @property
    def connected(self) -> bool:
        return self._connected

    @staticmethod
    def validate_ssh_key(key: str) -> bool:
        return validate_ssh_key(key)

    async def __aenter__(self) -> "SessionManager":
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.disconnect()

    # Notifications

    def on(self, event: str, callback: Listener) -> None:
        """Register ``callback`` for ``"connected"`` or ``"disconnected"``."""
        if event not in self._listeners:
            raise ValueError(f"Unknown event '{event}'; expected one of {', '.join(EVENTS)}")
        self._listeners[event].append(callback)

    def off(self, event: str, callback: Listener) -> None:
        listeners = self._listeners.get(event, [])
        if callback in listeners:
            listeners.remove(callback)

    def _emit(self, event: str) -> None:
        for callback in list(self._listeners[event]):
            try:
                result = callback()
            except Exception:
                self._log.exception("Listener for '%s' event failed", event)
                continue
            if inspect.isawaitable(result):
                task = asyncio.ensure_future(result)
                self._listener_tasks.add(task)
                task.add_done_callback(self._listener_done)

    def _listener_done(self, task: asyncio.Future) -> None:
        self._listener_tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            self._log.error("Async listener failed", exc_info=exc)

    # Lifecycle

    def _client_keys(self) -> Optional[list[asyncssh.SSHKey]]:
        if not self.config.private_key:
            return None
        return [asyncssh.import_private_key(self.config.private_key, self.config.passphrase)]

    async def connect(self) -> None:
        """Open the session, waiting at most ``config.connect_timeout`` seconds.

        Overlapping calls share one handshake: later callers wait for the
        first and return without connecting again.
        """
        async with self._connect_lock:
            if self._connected:
                self._log.debug("Already connected; ignoring connect()")
                return
            await self._open()

    async def _open(self) -> None:
        config = self.config
        try:
            connection = await asyncio.wait_for(
                asyncssh.connect(
                    host=config.host,
                    port=config.port,
                    username=config.username,
                    password=config.password,
                    client_keys=self._client_keys(),
                    known_hosts=config.known_hosts,
                    keepalive_interval=config.keepalive_interval,
                ),
                timeout=config.connect_timeout,
            )
        except asyncio.TimeoutError as exc:
            self._log.warning("SSH connection timed out after %ss", config.connect_timeout)
            raise ConnectionFailed("Failed to connect: Connection timed out") from exc
        except (asyncssh.Error, OSError) as exc:
            self._log.warning("SSH connection failed: %s", exc)
            raise ConnectionFailed(f"Failed to connect: {_error_text(exc)}") from exc
        except Exception as exc:
            self._log.exception("Unexpected SSH error while connecting")
            raise ConnectionFailed(f"Failed to connect: {_error_text(exc)}") from exc

        self._conn = connection
        self._connected = True
        self._log.info("SSH session established")
        self._emit("connected")

    async def execute_command(self, command: str) -> str:
        """Run ``command`` and return its stdout.

        Any stderr output counts as failure, whatever the exit status, so
        tools that print progress to stderr will raise :class:`CommandFailed`.
        """
        if not self._connected or self._conn is None:
            raise NotConnected()

        async with self._command_lock:
            # disconnect() may have run while this call waited for the lock
            conn = self._conn
            if not self._connected or conn is None:
                raise NotConnected()
            self._log.debug("Running command: %s", command)
            try:
                run = conn.run(command, check=False)
                if self.config.command_timeout is not None:
                    result = await asyncio.wait_for(run, timeout=self.config.command_timeout)
                else:
                    result = await run
            except asyncio.TimeoutError as exc:
                raise CommandFailed(
                    "Command execution failed: SSH command timed out", command=command
                ) from exc
            except Exception as exc:
                raise CommandFailed(
                    f"Command execution failed: {_error_text(exc)}", command=command
                ) from exc

        stdout = _decode_text(getattr(result, "stdout", ""))
        stderr = _decode_text(getattr(result, "stderr", ""))
        exit_status = getattr(result, "exit_status", None)
        if stderr:
            self._log.debug("Command wrote to stderr (exit status %s)", exit_status)
            raise CommandFailed(
                f"Command execution failed: {stderr}",
                command=command,
                stdout=stdout,
                stderr=stderr,
                exit_status=exit_status,
            )
        return stdout

    async def disconnect(self) -> None:
        """Close the session. Safe to call repeatedly; never raises."""
        if not self._connected:
            return

        conn, self._conn = self._conn, None
        try:
            if conn is not None:
                conn.close()
                await conn.wait_closed()
        except Exception:
            self._log.warning("Error while closing SSH connection", exc_info=True)

        self._connected = False
        self._log.info("SSH session closed")
        self._emit("disconnected")
