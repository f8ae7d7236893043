"""Tests for apicheck.config."""

from __future__ import annotations

from pathlib import Path

import pytest

from apicheck.config import ApiCheckConfig, load_config
from apicheck.errors import ConfigError


def test_load_config_returns_defaults_when_missing(tmp_path: Path) -> None:
    config = load_config(tmp_path)

    assert isinstance(config, ApiCheckConfig)
    assert config.root == tmp_path.resolve()
    assert config.filters.include_internal is False
    assert config.filters.exclude_namespaces == []
    assert config.filters.exclude_types == []
    assert config.compare.ignore_types == []
    assert config.output is None


def test_load_config_parses_expected_fields(tmp_path: Path) -> None:
    config_file = tmp_path / ".apicheck.yml"
    config_file.write_text(
        """
filters:
  include_internal: "yes"
  exclude_namespaces:
    - Sample.Internal
  exclude_types: "*Tests"
compare:
  ignore_types: [Sample.Experimental.*]
output: baselines/Sample.json
""",
        encoding="utf-8",
    )

    config = load_config(config_file)

    assert config.root == tmp_path.resolve()
    assert config.filters.include_internal is True
    assert config.filters.exclude_namespaces == ["Sample.Internal"]
    assert config.filters.exclude_types == ["*Tests"]
    assert config.compare.ignore_types == ["Sample.Experimental.*"]
    assert config.output == tmp_path.resolve() / "baselines" / "Sample.json"


def test_empty_config_file_gives_defaults(tmp_path: Path) -> None:
    (tmp_path / ".apicheck.yml").write_text("\n", encoding="utf-8")

    config = load_config(tmp_path)

    assert config.filters.include_internal is False


@pytest.mark.parametrize("content", ["- a\n- b\n", "filters: [\n"])
def test_invalid_config_raises(tmp_path: Path, content: str) -> None:
    (tmp_path / ".apicheck.yml").write_text(content, encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(tmp_path)
