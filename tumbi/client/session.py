"""Persistent session: the access token and the user it belongs to."""

import json
from pathlib import Path
from typing import Any, Dict, Optional, Union

from tumbi.core.logging import get_logger

logger = get_logger(__name__)


class SessionContext:
    """
    Holds the signed-in user's token and cached profile.

    State lives in a small JSON file so a restart keeps the user signed in.
    Pass ``path=None`` for a session that only lives in memory.

    Lifecycle: ``load()`` once at startup, ``save()`` after login or
    registration, ``clear()`` on logout or when the server rejects the token.
    """

    def __init__(self, path: Optional[Union[str, Path]] = None):
        self.path = Path(path) if path else None
        self.token: Optional[str] = None
        self.user: Optional[Dict[str, Any]] = None

    @property
    def is_authenticated(self) -> bool:
        return self.token is not None

    @property
    def user_id(self) -> Optional[int]:
        return self.user.get("id") if self.user else None

    def load(self) -> bool:
        """Restore a stored session. Returns True if a token was found."""
        if not self.path or not self.path.exists():
            return False

        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Ignoring unreadable session file {self.path}: {e}")
            return False

        self.token = data.get("token") or None
        self.user = data.get("user") if self.token else None
        return self.is_authenticated

    def save(self, token: str, user: Dict[str, Any]) -> None:
        self.token = token
        self.user = user
        self._write({"token": token, "user": user})

    def update_user(self, user: Dict[str, Any]) -> None:
        """Refresh the cached profile without touching the token."""
        if self.token:
            self.save(self.token, user)

    def clear(self) -> None:
        self.token = None
        self.user = None
        if self.path and self.path.exists():
            self.path.unlink()

    def _write(self, data: Dict[str, Any]) -> None:
        if not self.path:
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data), encoding="utf-8")
