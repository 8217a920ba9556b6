from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import pytest

from exemplar.utils.log import _uninstall_exemplar_root_handler
from tests import get_testdata

if TYPE_CHECKING:
    from collections.abc import Generator


@pytest.fixture
def courses_document() -> str:
    return get_testdata("exemplar", "courses.html").decode("utf-8")


@pytest.fixture(autouse=True)
def _reset_root_handler() -> Generator[None]:
    """Remove the root handler installed by tests that configure logging"""
    level = logging.root.level
    yield
    _uninstall_exemplar_root_handler()
    logging.root.setLevel(level)
