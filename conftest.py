"""Root conftest: applies .env.test before any direct_chat module is imported."""
from __future__ import annotations

import os
from pathlib import Path


def _apply_env_file(path: Path) -> None:
    for line in path.read_text().splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        key, _, value = line.partition("=")
        # Test values override the shell so a local .env never points tests at Redis.
        os.environ[key.strip()] = value.strip()


_env_test = Path(__file__).resolve().parent / ".env.test"
if _env_test.exists():
    _apply_env_file(_env_test)
