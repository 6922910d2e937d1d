"""Sources of today's puzzle."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Protocol

from .errors import LoadError
from .puzzle import Puzzle


class PuzzleSource(Protocol):
    """Provide today's puzzle."""

    async def fetch_today(self) -> Puzzle:
        """Return today's puzzle or raise :class:`LoadError`."""


class LocalJsonPuzzleSource:
    """Load a puzzle from a local JSON file in the ``/api/puzzle/today`` format."""

    def __init__(self, path: Path | str) -> None:
        self._path = Path(path)

    async def fetch_today(self) -> Puzzle:
        try:
            data = self._path.read_text(encoding="utf-8")
        except OSError as exc:
            raise LoadError(f"Cannot read puzzle file {self._path}: {exc}") from exc
        try:
            payload = json.loads(data)
        except ValueError as exc:
            raise LoadError(f"Puzzle file {self._path} is not valid JSON") from exc
        return Puzzle.from_payload(payload)
