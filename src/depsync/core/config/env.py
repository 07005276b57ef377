"""Environment loading helpers.

depsync reads its configuration from environment variables. For local runs
those can also come from dotenv files, merged lowest to highest:
- User environment file (~/.config/depsync/.env)
- Project environment files (.env, then .env.local, in the working directory)
- OS environment

A value already present in the process environment (CI secrets, exported
shell variables) is never overridden by a file.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable

from dotenv import dotenv_values


def _read_env(path: Path) -> dict[str, str]:
    if not path.is_file():
        return {}
    return {
        str(key): str(value)
        for key, value in dotenv_values(path).items()
        if key and value is not None
    }


def user_env_path() -> Path:
    """Path of the per-user dotenv file, honouring XDG_CONFIG_HOME."""
    xdg_home = Path(os.environ.get("XDG_CONFIG_HOME", str(Path.home() / ".config")))
    return xdg_home / "depsync" / ".env"


def load_layered_env(
    *,
    project_dir: Path | None = None,
    user_env_paths: Iterable[Path] | None = None,
    project_env_paths: Iterable[Path] | None = None,
) -> None:
    """Load environment variables from user + project .env files.

    Files are merged in order, later files winning, and the result is applied
    only to keys the process environment does not already have.

    Args:
        project_dir: base directory for project env paths (defaults to cwd)
        user_env_paths: explicit user env file paths
        project_env_paths: explicit project env file paths
    """
    if project_dir is None:
        project_dir = Path.cwd()
    if user_env_paths is None:
        user_env_paths = [user_env_path()]
    if project_env_paths is None:
        project_env_paths = [project_dir / ".env", project_dir / ".env.local"]

    merged: dict[str, str] = {}
    for path in [*user_env_paths, *project_env_paths]:
        merged.update(_read_env(Path(path)))

    preexisting = set(os.environ)
    for key, value in merged.items():
        if key not in preexisting:
            os.environ[key] = value
