"""Config file discovery.

Walk-up finder locates blogcore.toml in the start directory or any parent,
similar to how git finds .git/. The BLOGCORE_CONFIG env var overrides the walk.
"""

from __future__ import annotations

import os
from pathlib import Path

CONFIG_FILENAME = "blogcore.toml"
CONFIG_ENV_VAR = "BLOGCORE_CONFIG"


def find_config(start: Path | None = None) -> Path | None:
    """Return the nearest blogcore.toml at or above *start* (default: cwd).

    When BLOGCORE_CONFIG is set it is authoritative: its path is returned if
    the file exists, otherwise None, and no walk happens.
    """
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        explicit = Path(env_path)
        return explicit if explicit.is_file() else None

    origin = (start or Path.cwd()).resolve()
    for directory in (origin, *origin.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None
