"""Storage backends for baseline documents."""

from .baseline_store import load_baseline, save_baseline

__all__ = ["load_baseline", "save_baseline"]
