"""Metadata source adapters and discovery utilities."""

from __future__ import annotations

from importlib import metadata
from pathlib import Path
from typing import Callable, Dict, Iterable

from ..errors import ModuleFormatError
from .base import InterfaceMap, MetadataSource, MethodSite, SlotKey
from .described import DescribedModuleSource
from .descriptors import TypeDescriptor, TypeRef

_ENTRY_POINT_GROUP = "apicheck.sources"

SourceFactory = Callable[[Path], MetadataSource]

_BUILTIN_FACTORIES: Dict[str, SourceFactory] = {
    ".yml": DescribedModuleSource.from_path,
    ".yaml": DescribedModuleSource.from_path,
    ".json": DescribedModuleSource.from_path,
}


def discover_sources() -> Dict[str, SourceFactory]:
    """Return source factories keyed by file suffix, plugins overriding builtins."""
    factories: Dict[str, SourceFactory] = dict(_BUILTIN_FACTORIES)
    for entry in _iter_entry_points():
        suffix = entry.name.lower()
        if not suffix.startswith("."):
            suffix = f".{suffix}"
        try:
            loaded = entry.load()
        except Exception as exc:  # pragma: no cover - defensive guard
            raise RuntimeError(f"Failed to load metadata source entry point '{entry.name}': {exc}") from exc
        factories[suffix] = _coerce_factory(loaded)
    return factories


def open_source(path: Path | str) -> MetadataSource:
    """Open ``path`` with the adapter registered for its suffix."""
    module_path = Path(path).expanduser()
    factory = discover_sources().get(module_path.suffix.lower())
    if factory is None:
        raise ModuleFormatError(f"No metadata source handles '{module_path.suffix}' files ({module_path})")
    source = factory(module_path)
    if not isinstance(source, MetadataSource):
        raise TypeError(f"Source factory for '{module_path.suffix}' did not return a MetadataSource")
    return source


def _coerce_factory(obj: object) -> SourceFactory:
    if isinstance(obj, type) and issubclass(obj, MetadataSource):
        from_path = getattr(obj, "from_path", None)
        if callable(from_path):
            return from_path
        return obj  # type: ignore[return-value]
    if callable(obj):
        return obj  # type: ignore[return-value]
    raise TypeError("Metadata source entry point must be a MetadataSource subclass or factory")


def _iter_entry_points() -> Iterable[metadata.EntryPoint]:
    try:
        entry_points = metadata.entry_points()
    except Exception:  # pragma: no cover - defensive guard
        return []

    if hasattr(entry_points, "select"):
        return entry_points.select(group=_ENTRY_POINT_GROUP)  # type: ignore[return-value]

    return entry_points.get(_ENTRY_POINT_GROUP, [])  # type: ignore[return-value]


__all__ = [
    "DescribedModuleSource",
    "InterfaceMap",
    "MetadataSource",
    "MethodSite",
    "SlotKey",
    "TypeDescriptor",
    "TypeRef",
    "discover_sources",
    "open_source",
]
