from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator

import pytest

from tests._fixtures.go_builder import GoModuleBuilder


@pytest.fixture
def go_module(tmp_path: Path) -> GoModuleBuilder:
    """Provide a reusable Go module builder rooted at the pytest tmp_path."""
    return GoModuleBuilder(tmp_path)


@pytest.fixture(autouse=True)
def _reset_godocgen_logger() -> Iterator[None]:
    """Undo CLI logging setup so caplog keeps seeing godocgen records."""
    yield
    logger = logging.getLogger("godocgen")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
