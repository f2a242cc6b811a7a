"""Session credential handling.

The bearer token lives in a small persistent key-value store on disk and is
handed to the lifecycle and the exporter as an explicit SessionContext.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path

from composer.config import Settings
from composer.exceptions import AuthenticationError

logger = logging.getLogger("vibelegal.composer.session")

TOKEN_KEY = "token"


class TokenStore:
    """JSON-file backed key-value store."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def _load(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except json.JSONDecodeError:
            logger.warning("Session file %s is corrupt, ignoring it", self.path)
            return {}
        return data if isinstance(data, dict) else {}

    def _dump(self, data: dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=self.path.parent, prefix=".session-")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(data, handle)
            os.replace(tmp, self.path)
        finally:
            if os.path.exists(tmp):
                os.unlink(tmp)

    def get(self, key: str) -> str | None:
        return self._load().get(key)

    def set(self, key: str, value: str) -> None:
        data = self._load()
        data[key] = value
        self._dump(data)

    def delete(self, key: str) -> None:
        data = self._load()
        if data.pop(key, None) is not None:
            self._dump(data)


@dataclass(frozen=True)
class SessionContext:
    """What a draft needs to talk to the services on the user's behalf."""

    token: str | None
    api_url: str
    timeout_seconds: float = 60.0

    @classmethod
    def from_settings(cls, settings: Settings, store: TokenStore | None = None) -> SessionContext:
        store = store or TokenStore(settings.session_file)
        return cls(
            token=store.get(TOKEN_KEY),
            api_url=settings.api_url,
            timeout_seconds=settings.timeout_seconds,
        )

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)

    def auth_headers(self) -> dict[str, str]:
        """Authorization header for collaborator calls.

        Raises:
            AuthenticationError: If there is no session token.
        """
        if not self.token:
            raise AuthenticationError("No session token. Please log in.")
        return {"Authorization": f"Bearer {self.token}"}
