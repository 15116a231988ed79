from __future__ import annotations

import logging
from pathlib import Path
from typing import Mapping

logger = logging.getLogger(__name__)


def serialize(entries: Mapping[str, str], destination: str | Path) -> str:
    """Write `entries` as raw `KEY=VALUE` lines, replacing `destination`.

    Values are not quoted, so a value holding `=`, `#`, quotes, spaces or
    newlines will not parse back to the same string.
    """
    path = Path(destination)
    with path.open("w", encoding="utf-8", newline="\n") as handle:
        for key, value in entries.items():
            handle.write(f"{key}={value}\n")
    logger.debug(f"Wrote {len(entries)} entries to {path}")
    return f"serialized to {destination}"
