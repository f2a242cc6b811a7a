"""Runtime settings, read from the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

DEFAULT_API_URL = "http://localhost:5000"
DEFAULT_SESSION_FILE = Path.home() / ".vibelegal" / "session.json"


@dataclass(slots=True)
class Settings:
    """Configuration for talking to the contract services.

    Attributes:
        api_url: Base URL of the generation and persistence services.
        timeout_seconds: HTTP timeout for each call. Generation is slow.
        session_file: Where the session credential is persisted.
        list_retry_attempts: Attempts for listing saved contracts.
        list_retry_wait_seconds: Base backoff between those attempts.
        saved_notice_seconds: How long the "saved" notice stays visible.
        log_level: Root level for the vibelegal loggers.
    """

    api_url: str = DEFAULT_API_URL
    timeout_seconds: float = 60.0
    session_file: Path = DEFAULT_SESSION_FILE
    list_retry_attempts: int = 3
    list_retry_wait_seconds: float = 0.5
    saved_notice_seconds: float = 3.0
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> Settings:
        """Build settings from ``VIBELEGAL_*`` environment variables."""
        return cls(
            api_url=os.getenv("VIBELEGAL_API_URL", DEFAULT_API_URL).rstrip("/"),
            timeout_seconds=float(os.getenv("VIBELEGAL_TIMEOUT_SECONDS", "60")),
            session_file=Path(
                os.getenv("VIBELEGAL_SESSION_FILE", str(DEFAULT_SESSION_FILE))
            ).expanduser(),
            list_retry_attempts=int(os.getenv("VIBELEGAL_LIST_RETRY_ATTEMPTS", "3")),
            log_level=os.getenv("VIBELEGAL_LOG_LEVEL", "INFO").upper(),
        )
