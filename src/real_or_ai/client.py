"""aiohttp client for the daily puzzle API."""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, Dict, Optional, Tuple

import aiohttp

from .errors import LeaderboardError, LoadError, TransportError
from .puzzle import AttemptResult, LeaderboardEntry, Puzzle, leaderboard_from_payload, parse_attempt_response

LOGGER = logging.getLogger(__name__)

USER_HEADER = "X-User-Id"


class ApiClient:
    """Talk to ``/api/puzzle/today``, ``/api/attempt`` and ``/api/leaderboard/today``.

    Implements :class:`~real_or_ai.sources.PuzzleSource`,
    :class:`~real_or_ai.submission.Scorer` and
    :class:`~real_or_ai.leaderboard.LeaderboardBackend`.
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout_seconds: float = 15.0,
        session: Optional[aiohttp.ClientSession] = None,
    ) -> None:
        if not base_url:
            raise ValueError("API base URL is required")
        self.base_url = base_url.rstrip("/")
        self._timeout = aiohttp.ClientTimeout(total=timeout_seconds)
        self._session = session
        self._owns_session = session is None

    async def __aenter__(self) -> "ApiClient":
        self._ensure_session()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def close(self) -> None:
        if self._session is not None and self._owns_session and not self._session.closed:
            await self._session.close()
        if self._owns_session:
            self._session = None

    def _ensure_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=self._timeout,
                headers={"Accept": "application/json"},
            )
            self._owns_session = True
        return self._session

    # ------------------------------------------------------------------ endpoints
    async def fetch_today(self) -> Puzzle:
        try:
            status, payload = await self._request("GET", "/api/puzzle/today")
        except TransportError as exc:
            raise LoadError(f"Failed to load puzzle: {exc}") from exc
        if status != 200:
            error = payload.get("error") if isinstance(payload, dict) else None
            raise LoadError(error or f"Failed to load puzzle ({status})")
        return Puzzle.from_payload(payload)

    async def post_attempt(
        self, puzzle_date: str, answers: Dict[str, str], user_token: str
    ) -> AttemptResult:
        body = {"puzzleDate": puzzle_date, "answers": answers}
        status, payload = await self._request(
            "POST",
            "/api/attempt",
            json_body=body,
            headers={USER_HEADER: user_token},
        )
        return parse_attempt_response(status, payload)

    async def fetch_leaderboard(self, limit: int) -> Tuple[str, Tuple[LeaderboardEntry, ...]]:
        try:
            status, payload = await self._request(
                "GET", "/api/leaderboard/today", params={"limit": str(limit)}
            )
        except TransportError as exc:
            raise LeaderboardError(f"Failed to load leaderboard: {exc}") from exc
        if status != 200:
            error = payload.get("error") if isinstance(payload, dict) else None
            raise LeaderboardError(error or f"Failed to load leaderboard ({status})")
        return leaderboard_from_payload(payload)

    # ------------------------------------------------------------------ transport
    async def _request(
        self,
        method: str,
        path: str,
        *,
        json_body: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
        params: Optional[Dict[str, str]] = None,
    ) -> Tuple[int, Any]:
        """Return ``(status, decoded JSON)``; raise :class:`TransportError` otherwise."""
        session = self._ensure_session()
        url = f"{self.base_url}{path}"
        LOGGER.debug("%s %s", method, url)
        try:
            async with session.request(
                method, url, json=json_body, headers=headers, params=params
            ) as response:
                text = await response.text()
                status = response.status
        except asyncio.TimeoutError as exc:
            raise TransportError(f"{method} {path} timed out") from exc
        except aiohttp.ClientError as exc:
            raise TransportError(f"{method} {path} failed: {exc}") from exc

        try:
            payload = json.loads(text) if text else None
        except ValueError as exc:
            if status == 200:
                raise TransportError(f"{method} {path} returned a non-JSON body") from exc
            LOGGER.debug("Non-JSON error body from %s (%s)", path, status)
            payload = None
        return status, payload


__all__ = ["ApiClient", "USER_HEADER"]
