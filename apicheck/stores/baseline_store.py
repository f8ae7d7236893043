"""Persistence of baseline documents as JSON files."""

from __future__ import annotations

import json
from pathlib import Path

from ..errors import BaselineFormatError
from ..logging import get_logger
from ..models import BaselineDocument

_FORMAT_VERSION = 1

logger = get_logger("stores.baseline")


def save_baseline(document: BaselineDocument, path: Path) -> Path:
    """Write ``document`` to ``path`` and return the resolved path."""
    payload = {"version": _FORMAT_VERSION, **document.to_dict()}
    target = Path(path).expanduser()
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(json.dumps(payload, indent=2) + "\n", encoding="utf-8")
    logger.debug("Wrote baseline with %d types to %s", len(document.types), target)
    return target.resolve()


def load_baseline(path: Path) -> BaselineDocument:
    """Read a baseline previously written by ``save_baseline``."""
    source = Path(path).expanduser()
    try:
        data = json.loads(source.read_text(encoding="utf-8"))
    except FileNotFoundError:
        raise
    except (OSError, json.JSONDecodeError) as exc:
        raise BaselineFormatError(f"Cannot read baseline {source}: {exc}") from exc
    if not isinstance(data, dict):
        raise BaselineFormatError(f"Baseline {source.name} must contain a JSON object")
    version = data.get("version", _FORMAT_VERSION)
    if version != _FORMAT_VERSION:
        raise BaselineFormatError(f"Unsupported baseline format version {version!r} in {source.name}")
    return BaselineDocument.from_dict(data)


__all__ = ["load_baseline", "save_baseline"]
