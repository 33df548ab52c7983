"""Helpers for loading project environment configuration."""

from __future__ import annotations

import os
from pathlib import Path
from typing import List

from dotenv import find_dotenv, load_dotenv

from heroledger.logging import get_logger

log = get_logger(__name__)

# made absolute after loading so a later chdir doesn't move them
PATH_VARS = ("HEROLEDGER_DATA_DIR", "HEROLEDGER_CONFIG")


def _env_files() -> List[Path]:
    cwd = Path.cwd()
    files: List[Path] = []
    base = find_dotenv(".env", usecwd=True)
    if base:
        files.append(Path(base))
    files.append(cwd / ".env.local")
    if os.getenv("PYTEST_CURRENT_TEST"):
        files.append(cwd / ".env.test")
    return [p for p in files if p.is_file()]


def load_env() -> List[Path]:
    """Load .env files without overriding the process env; returns the files read."""
    loaded = _env_files()
    for path in loaded:
        load_dotenv(path, override=False)

    for var in PATH_VARS:
        value = os.getenv(var)
        if not value:
            continue
        normalized = Path(value).expanduser()
        try:
            normalized = normalized.resolve()
        except OSError:
            pass
        os.environ[var] = str(normalized)

    if loaded:
        log.debug("environment loaded from %s", ", ".join(str(p) for p in loaded))
    return loaded
