"""Config file discovery.

Walk-up finder locates ``sqlsheet.toml`` the way git finds ``.git/``.
The ``SQLSHEET_CONFIG`` env var and the ``--config`` flag override it.
Parsing happens in :class:`sqlsheet.config.settings.TomlSettingsSource`.
"""

from __future__ import annotations

import os
from pathlib import Path

CONFIG_FILENAME = "sqlsheet.toml"
CONFIG_ENV_VAR = "SQLSHEET_CONFIG"


def find_config(start: Path | None = None) -> Path | None:
    """Walk up from *start* (default: cwd) looking for ``sqlsheet.toml``.

    ``SQLSHEET_CONFIG`` wins when set; a dangling env path means no config.
    """
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        p = Path(env_path)
        return p if p.is_file() else None

    current = (start or Path.cwd()).resolve()
    for directory in (current, *current.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None
