from __future__ import annotations

import os
from pathlib import Path

ENV_DATA = "HEARTSPACE_DATA"


def config_dir() -> Path:
    return Path.home() / ".config" / "heartspace"


def default_data_path(profile: str | None = None) -> Path:
    name = f"{profile}.json" if profile else "data.json"
    return config_dir() / name


def resolve_data_path(data_arg: str | None, profile: str | None) -> Path:
    if data_arg:
        return Path(data_arg).expanduser().resolve()
    env = os.environ.get(ENV_DATA)
    if env:
        return Path(env).expanduser().resolve()
    return default_data_path(profile).expanduser().resolve()


def default_log_path(data_path: Path) -> Path:
    return Path(data_path).parent / "heartspace.log"
