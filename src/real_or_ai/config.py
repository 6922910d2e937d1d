"""Runtime settings for the quiz client, read from the environment."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, replace
from typing import Mapping, Optional

from .identity import DEFAULT_IDENTITY_FILE
from .utils.env_utils import load_env

LOGGER = logging.getLogger(__name__)

DEFAULT_API_BASE = "http://127.0.0.1:8787"
DEFAULT_LEADERBOARD_LIMIT = 10
DEFAULT_TIMEOUT_SECONDS = 15.0


@dataclass(frozen=True)
class QuizSettings:
    api_base: str = DEFAULT_API_BASE
    puzzle_path: Optional[str] = None
    leaderboard_limit: int = DEFAULT_LEADERBOARD_LIMIT
    request_timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    identity_file: str = DEFAULT_IDENTITY_FILE

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "QuizSettings":
        env = os.environ if environ is None else environ
        return cls(
            api_base=(env.get("API_BASE") or DEFAULT_API_BASE).strip(),
            puzzle_path=(env.get("PUZZLE_PATH") or "").strip() or None,
            leaderboard_limit=_positive_int(env, "LEADERBOARD_LIMIT", DEFAULT_LEADERBOARD_LIMIT),
            request_timeout_seconds=_positive_float(
                env, "REQUEST_TIMEOUT_SECONDS", DEFAULT_TIMEOUT_SECONDS
            ),
            identity_file=(env.get("IDENTITY_FILE") or DEFAULT_IDENTITY_FILE).strip(),
        )

    def override(self, **changes: object) -> "QuizSettings":
        """Return a copy with every non-``None`` value in ``changes`` applied."""
        return replace(self, **{k: v for k, v in changes.items() if v is not None})


def load_settings(env_file: Optional[str] = None) -> QuizSettings:
    """Load ``.env`` (``ENV_FILE``, default ``.env``) then build settings."""
    load_env(env_file or os.getenv("ENV_FILE", ".env"))
    return QuizSettings.from_env()


def _positive_int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name)
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        LOGGER.warning("Ignoring %s=%r: not an integer", name, raw)
        return default
    if value < 1:
        LOGGER.warning("Ignoring %s=%r: must be positive", name, raw)
        return default
    return value


def _positive_float(env: Mapping[str, str], name: str, default: float) -> float:
    raw = env.get(name)
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        LOGGER.warning("Ignoring %s=%r: not a number", name, raw)
        return default
    if value <= 0:
        LOGGER.warning("Ignoring %s=%r: must be positive", name, raw)
        return default
    return value
