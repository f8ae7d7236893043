"""Configuration loading for apicheck (.apicheck.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

from .errors import ConfigError

CONFIG_FILE_NAME = ".apicheck.yml"


@dataclass
class FilterConfig:
    """Which types enter a generated baseline."""

    include_internal: bool = False
    exclude_namespaces: List[str] = field(default_factory=list)
    exclude_types: List[str] = field(default_factory=list)


@dataclass
class CompareConfig:
    """Settings for baseline comparison."""

    ignore_types: List[str] = field(default_factory=list)


@dataclass
class ApiCheckConfig:
    """Represents the settings defined in .apicheck.yml."""

    root: Path
    filters: FilterConfig = field(default_factory=FilterConfig)
    compare: CompareConfig = field(default_factory=CompareConfig)
    output: Optional[Path] = None


def load_config(config_path: Path) -> ApiCheckConfig:
    """Load configuration from disk; a missing file yields the defaults."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return ApiCheckConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILE_NAME} must contain a mapping at the root")

    filters = FilterConfig()
    filter_data = _as_dict(data.get("filters"))
    if filter_data:
        filters.include_internal = _as_bool(filter_data.get("include_internal")) or False
        filters.exclude_namespaces = _as_str_list(filter_data.get("exclude_namespaces"))
        filters.exclude_types = _as_str_list(filter_data.get("exclude_types"))

    compare = CompareConfig()
    compare_data = _as_dict(data.get("compare"))
    if compare_data:
        compare.ignore_types = _as_str_list(compare_data.get("ignore_types"))

    output_str = _as_str(data.get("output"))
    output = root / output_str if output_str else None

    return ApiCheckConfig(root=root, filters=filters, compare=compare, output=output)


def _resolve_config_path(config_path: Path) -> Path:
    config_path = Path(config_path).expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILE_NAME).resolve()
    if config_path.suffix not in {".yml", ".yaml"}:
        return (config_path.parent / CONFIG_FILE_NAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded if loaded is not None else {}


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float)) and not isinstance(value, bool) else None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float, bool))]
    return []


__all__ = ["ApiCheckConfig", "CompareConfig", "FilterConfig", "load_config"]
