"""Durable storage for the admin bearer token."""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

TOKEN_STORAGE_KEY = "admin_access_token"


class MemoryTokenStore:
    """Token store that lives only as long as the process."""

    def __init__(self, token: Optional[str] = None) -> None:
        self._token = token

    def load(self) -> Optional[str]:
        return self._token

    def save(self, token: str) -> None:
        self._token = token

    def clear(self) -> None:
        self._token = None


class FileTokenStore:
    """Keep the bearer token in a small JSON file so it survives restarts.

    Read and write failures are logged and treated as "no token"; losing the
    token never blocks a review session.
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path).expanduser()

    def load(self) -> Optional[str]:
        if not self.path.exists():
            return None
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            logger.warning("Could not read token file %s: %s", self.path, exc)
            return None
        token = data.get(TOKEN_STORAGE_KEY) if isinstance(data, dict) else None
        return token if isinstance(token, str) and token else None

    def save(self, token: str) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps({TOKEN_STORAGE_KEY: token}), encoding="utf-8")
        except OSError as exc:
            logger.warning("Could not write token file %s: %s", self.path, exc)

    def clear(self) -> None:
        try:
            self.path.unlink(missing_ok=True)
        except OSError as exc:
            logger.warning("Could not remove token file %s: %s", self.path, exc)
