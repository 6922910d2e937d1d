"""Stable, opaque identity for the current user."""

from __future__ import annotations

import json
import logging
import os
import uuid
from pathlib import Path
from typing import Optional, Protocol

LOGGER = logging.getLogger(__name__)

DEFAULT_IDENTITY_FILE = ".real_or_ai_identity.json"


class IdentityProvider(Protocol):
    def user_token(self) -> str:
        """Return the opaque token identifying this user."""


class StaticIdentityProvider:
    """Identity fixed at construction; handy for tests and scripted runs."""

    def __init__(self, token: str) -> None:
        if not token:
            raise ValueError("Identity token must be non-empty")
        self._token = token

    def user_token(self) -> str:
        return self._token


class FileIdentityProvider:
    """Create a random token on first use and persist it in a JSON file.

    The token lives as long as the file does; every later session, on any
    day, reads the same value back.
    """

    def __init__(self, path: Optional[Path | str] = None) -> None:
        default_path = Path(os.getenv("IDENTITY_FILE", DEFAULT_IDENTITY_FILE))
        self.path = Path(path) if path is not None else default_path
        self._token: Optional[str] = None

    def user_token(self) -> str:
        if self._token is None:
            self._token = self._load() or self._create()
        return self._token

    def _load(self) -> Optional[str]:
        if not self.path.exists():
            return None
        try:
            payload = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            LOGGER.warning("Identity file %s is unreadable (%s); issuing a new token", self.path, exc)
            return None
        token = payload.get("user_id") if isinstance(payload, dict) else None
        if isinstance(token, str) and token.strip():
            return token.strip()
        return None

    def _create(self) -> str:
        token = str(uuid.uuid4())
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps({"user_id": token}, indent=2), encoding="utf-8")
        LOGGER.debug("Created new user identity at %s", self.path)
        return token
