"""Locating and reading ``refnet.toml``.

Lookup order: the ``REFNET_CONFIG`` env var if set (and only that file),
otherwise the nearest ``refnet.toml`` walking up from the start directory,
the way git finds ``.git/``. The ``--config`` CLI flag bypasses discovery.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any

import click

from refnet.config.models import RefnetConfig

CONFIG_FILENAME = "refnet.toml"
CONFIG_ENV_VAR = "REFNET_CONFIG"


def find_config(start: Path | None = None) -> Path | None:
    """Return the config file in effect for *start* (default: cwd), or None."""
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        path = Path(override)
        return path if path.is_file() else None

    directory = (start or Path.cwd()).resolve()
    for candidate_dir in (directory, *directory.parents):
        candidate = candidate_dir / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None


def read_toml(path: Path) -> dict[str, Any]:
    """Parse *path*, turning syntax errors into a CLI-friendly exception."""
    try:
        return tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as exc:
        raise click.ClickException(f"Invalid TOML in {path}: {exc}") from exc


def load_config(path: Path | None = None, cwd: Path | None = None) -> RefnetConfig:
    """Validate the config file at *path* (or the discovered one).

    Missing files give the all-defaults config.
    """
    path = path or find_config(cwd)
    if path is None:
        return RefnetConfig()
    return RefnetConfig.model_validate(read_toml(path))
