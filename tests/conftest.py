from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator

import pytest

from tests._fixtures.target_builder import TargetBuilder


@pytest.fixture
def target_builder(tmp_path: Path) -> TargetBuilder:
    """Provide a parser output tree rooted at the pytest tmp_path."""
    return TargetBuilder(tmp_path)


@pytest.fixture(autouse=True)
def _reset_eodoc_logger() -> Iterator[None]:
    """Undo configure_logging so caplog sees eodoc records in every test."""
    yield
    logger = logging.getLogger("eodoc")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
