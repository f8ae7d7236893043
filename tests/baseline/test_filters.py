"""Tests for apicheck.baseline.filters."""

from __future__ import annotations

from typing import Sequence

from apicheck.baseline import BaselineGenerator, TypeFilter, filters_from_config
from apicheck.baseline.filters import exclude_names, exclude_namespaces, public_api_only
from apicheck.config import FilterConfig
from tests._fixtures.module_builder import ModuleBuilder

MODULE = """
    module: Sample
    types:
      - name: Sample.Api
        access: public
        nested_types:
          - {name: Visible, access: protected}
          - {name: Secret, access: private}
      - name: Sample.Helpers
        access: internal
        nested_types:
          - {name: Exposed, access: public}
      - name: Sample.Internal.Plumbing
        access: public
      - name: Sample.ApiTests
        access: public
"""


def _names(module_builder: ModuleBuilder, filters: Sequence[TypeFilter]) -> list[str]:
    document = BaselineGenerator(module_builder.load(MODULE), filters).generate_baseline()
    return [type_baseline.name for type_baseline in document.types]


def test_public_api_only_checks_enclosing_types(module_builder: ModuleBuilder) -> None:
    assert _names(module_builder, [public_api_only]) == [
        "Sample.Api",
        "Sample.Api+Visible",
        "Sample.Internal.Plumbing",
        "Sample.ApiTests",
    ]


def test_exclude_namespaces_matches_prefix_segments(module_builder: ModuleBuilder) -> None:
    names = _names(module_builder, [exclude_namespaces(["Sample.Internal", "  "])])

    assert "Sample.Internal.Plumbing" not in names
    assert "Sample.Api" in names


def test_exclude_names_uses_globs_on_canonical_names(module_builder: ModuleBuilder) -> None:
    names = _names(module_builder, [exclude_names(["*Tests", "Sample.Api+*"])])

    assert names == ["Sample.Api", "Sample.Helpers", "Sample.Helpers+Exposed", "Sample.Internal.Plumbing"]


def test_filters_from_config(module_builder: ModuleBuilder) -> None:
    config = FilterConfig(exclude_namespaces=["Sample.Internal"], exclude_types=["*Tests"])

    assert _names(module_builder, filters_from_config(config)) == ["Sample.Api", "Sample.Api+Visible"]
    assert filters_from_config(FilterConfig(include_internal=True)) == []
