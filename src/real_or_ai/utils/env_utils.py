"""Read and update ``.env`` files holding client settings."""

from __future__ import annotations

import logging
import os
from typing import Dict, List

LOGGER = logging.getLogger("real_or_ai.env")


def parse_env_lines(lines: List[str]) -> Dict[str, str]:
    values: Dict[str, str] = {}
    for raw in lines:
        line = raw.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip().strip('"').strip("'")
        if key:
            values[key] = value
    return values


def load_env(path: str = ".env") -> None:
    """Populate ``os.environ`` from ``path`` without overriding existing values."""
    if not os.path.exists(path):
        return
    try:
        with open(path, "r", encoding="utf-8") as f:
            values = parse_env_lines(f.readlines())
    except OSError as exc:
        LOGGER.warning("Could not read %s: %s", path, exc)
        return
    for key, value in values.items():
        if key not in os.environ:
            os.environ[key] = value


def append_to_env_file(env_file: str, key: str, value: str) -> None:
    """Append or update a KEY="value" entry in ``env_file``. Idempotent."""
    lines: List[str] = []
    if os.path.exists(env_file):
        with open(env_file, "r", encoding="utf-8") as f:
            lines = f.readlines()

    for i, line in enumerate(lines):
        if line.strip().startswith(f"{key}="):
            lines[i] = f'{key}="{value}"\n'
            break
    else:
        if lines and not lines[-1].endswith("\n"):
            lines[-1] = lines[-1] + "\n"
        if not lines:
            lines.append("# Real or AI client configuration\n")
        lines.append(f'{key}="{value}"\n')

    with open(env_file, "w", encoding="utf-8") as f:
        f.writelines(lines)
