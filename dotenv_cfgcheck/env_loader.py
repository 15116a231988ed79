from __future__ import annotations

import logging
from pathlib import Path

from .env_parser import EnvSyntaxError, process

logger = logging.getLogger(__name__)

ENV_SUFFIX = ".env"


class FindEnvError(Exception):
    """Base class for failures while locating, reading or parsing a `.env` file."""


class EnvNotFoundError(FindEnvError):
    def __init__(self, message: str = "Env file not found in current or any parent directories") -> None:
        super().__init__(message)


class EnvReadError(FindEnvError):
    def __init__(self, path: Path, error: OSError | UnicodeDecodeError) -> None:
        super().__init__(f"cannot read {path}: {error}")
        self.path = path
        self.error = error


class EnvParseError(FindEnvError):
    def __init__(self, path: Path, error: EnvSyntaxError) -> None:
        super().__init__(f"Env parsing error in {path}: {error}")
        self.path = path
        self.error = error


class EnvLoader:
    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def load(self) -> dict[str, str]:
        # Text mode folds \r\n into \n before the parser sees it.
        text = self.path.read_text(encoding="utf-8")
        entries = process(text)
        logger.debug(f"Loaded {len(entries)} entries from {self.path}")
        return entries


def find_nearest_env(start_directory: str | Path | None = None) -> Path | None:
    """Return the first `*.env` file found walking up from `start_directory`.

    Only direct entries of each directory are considered; within one directory
    the lexically first match wins. Returns None once the filesystem root has
    been searched without a match.
    """
    directory = Path(start_directory) if start_directory is not None else Path.cwd()
    directory = directory.resolve()
    while True:
        logger.debug(f"Searching {directory} for *{ENV_SUFFIX} files")
        found = _env_file_in(directory)
        if found is not None:
            logger.info(f"Found env file {found}")
            return found
        if directory.parent == directory:
            return None
        directory = directory.parent


def _env_file_in(directory: Path) -> Path | None:
    try:
        entries = sorted(directory.iterdir())
    except OSError as exc:
        logger.debug(f"Skipping unreadable directory {directory}: {exc}")
        return None
    for entry in entries:
        if not entry.name.endswith(ENV_SUFFIX):
            continue
        try:
            if entry.is_file():
                return entry
        except OSError as exc:
            logger.debug(f"Skipping unreadable entry {entry}: {exc}")
    return None


def find_env(start_directory: str | Path | None = None) -> dict[str, str]:
    path = find_nearest_env(start_directory)
    if path is None:
        raise EnvNotFoundError()
    try:
        return EnvLoader(path).load()
    except (OSError, UnicodeDecodeError) as exc:
        raise EnvReadError(path, exc) from exc
    except EnvSyntaxError as exc:
        raise EnvParseError(path, exc) from exc


__all__ = [
    "EnvLoader",
    "EnvNotFoundError",
    "EnvParseError",
    "EnvReadError",
    "EnvSyntaxError",
    "FindEnvError",
    "find_env",
    "find_nearest_env",
]
