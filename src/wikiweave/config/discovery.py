"""Config file discovery.

Walk-up finder locates wikiweave.toml the way git finds .git/, starting
from the corpus directory. The WIKIWEAVE_CONFIG env var and the
--config CLI flag bypass the walk.
"""

from __future__ import annotations

import os
from pathlib import Path

CONFIG_FILENAME = "wikiweave.toml"
CONFIG_ENV_VAR = "WIKIWEAVE_CONFIG"


def find_config(start: Path | None = None) -> Path | None:
    """Return the nearest wikiweave.toml at or above *start* (default: cwd).

    A WIKIWEAVE_CONFIG env var wins over the walk; if it names a missing
    file, no config is used at all.
    """
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        candidate = Path(env_path)
        return candidate if candidate.is_file() else None

    current = (start or Path.cwd()).resolve()
    for directory in (current, *current.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None
