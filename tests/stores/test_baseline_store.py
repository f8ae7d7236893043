"""Tests for apicheck.stores.baseline_store."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from apicheck.errors import BaselineFormatError
from apicheck.models import BaselineDocument
from apicheck.stores import load_baseline, save_baseline


def test_save_and_load_preserve_every_record(tmp_path: Path, scenarios_baseline: BaselineDocument) -> None:
    path = save_baseline(scenarios_baseline, tmp_path / "out" / "Scenarios.baseline.json")

    loaded = load_baseline(path)

    assert loaded == scenarios_baseline
    assert [type_baseline.id for type_baseline in loaded.types] == [
        type_baseline.id for type_baseline in scenarios_baseline.types
    ]


def test_saved_file_is_versioned_json(tmp_path: Path, scenarios_baseline: BaselineDocument) -> None:
    path = save_baseline(scenarios_baseline, tmp_path / "baseline.json")

    payload = json.loads(path.read_text(encoding="utf-8"))

    assert payload["version"] == 1
    assert payload["assembly_identity"] == scenarios_baseline.assembly_identity
    assert payload["types"][0]["id"] == "public class Scenarios.BasicClass"


def test_load_missing_file_raises_file_not_found(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_baseline(tmp_path / "missing.json")


@pytest.mark.parametrize(
    ("content", "message"),
    [
        ("{not json", "Cannot read baseline"),
        ("[]", "must contain a JSON object"),
        ('{"version": 2, "types": []}', "Unsupported baseline format version"),
        ('{"types": [{"kind": "Class"}]}', "'name' must be a string"),
        ('{"types": [{"name": "A", "kind": "Record"}]}', "Unknown BaselineKind"),
    ],
)
def test_load_rejects_malformed_documents(tmp_path: Path, content: str, message: str) -> None:
    path = tmp_path / "broken.json"
    path.write_text(content, encoding="utf-8")

    with pytest.raises(BaselineFormatError, match=message):
        load_baseline(path)
