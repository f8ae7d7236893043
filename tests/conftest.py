from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator

import pytest

from apicheck.baseline import BaselineGenerator
from apicheck.models import BaselineDocument
from tests._fixtures.module_builder import ModuleBuilder, load_scenarios


@pytest.fixture
def module_builder(tmp_path: Path) -> ModuleBuilder:
    """Provide a reusable module builder rooted at the pytest tmp_path."""
    return ModuleBuilder(tmp_path)


@pytest.fixture
def scenarios_baseline() -> BaselineDocument:
    """Unfiltered baseline of the shared scenarios module."""
    return BaselineGenerator(load_scenarios()).generate_baseline()


@pytest.fixture(autouse=True)
def _reset_apicheck_logger() -> Iterator[None]:
    """Drop handlers the CLI installs so later tests do not write to closed streams."""
    yield
    logger = logging.getLogger("apicheck")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
