"""SSH key helpers: public key syntax checks and known_hosts lookup."""

from __future__ import annotations

import re
from pathlib import Path

from sshrunner.core.config import settings
from sshrunner.core.logging import get_logger

from .errors import KnownHostsError

logger = get_logger(__name__)

# algorithm, base64 body with up to three "=" pads, then a comment field
_PUBLIC_KEY_RE = re.compile(r"^(ssh-rsa|ssh-ed25519)\s+[A-Za-z0-9+/]+={0,3}\s+.+$")


def validate_ssh_key(key: str) -> bool:
    """Return True if ``key`` looks like an OpenSSH ``ssh-rsa``/``ssh-ed25519`` public key.

    Only the shape is checked (algorithm, base64 body, comment); the key
    material itself is not decoded.
    """
    if not isinstance(key, str):
        return False
    return _PUBLIC_KEY_RE.fullmatch(key.strip()) is not None


def _missing_known_hosts(message: str) -> None:
    if settings.is_production:
        raise KnownHostsError(message)
    logger.warning("%s; host key verification disabled outside production", message)


def resolve_known_hosts() -> str | None:
    """Pick the known_hosts file for new sessions.

    Returns ``None`` when verification is switched off, or when no file is
    available outside production. In production a missing file raises
    :class:`KnownHostsError` instead.
    """
    if not settings.ssh_strict_host_verify:
        return None

    configured = settings.ssh_known_hosts_path
    if configured:
        path = Path(configured).expanduser()
        if path.exists():
            return str(path)
        _missing_known_hosts(f"Known hosts file not found: {path}")
        return None

    default_path = Path("~/.ssh/known_hosts").expanduser()
    if default_path.exists():
        return str(default_path)

    _missing_known_hosts(
        "SSH host verification enabled but no known_hosts file found; set "
        "SSH_KNOWN_HOSTS_PATH or disable via SSH_STRICT_HOST_VERIFY=false"
    )
    return None
