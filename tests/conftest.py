"""Pytest configuration shared by the engine tests."""

import io

import pytest

from tabsort.engine.memory import MemoryBrowser
from tests.builders import WINDOW_ID


@pytest.fixture()
def make_browser():
    """Build a MemoryBrowser holding one window."""

    def _make(tabs, groups=()):
        return MemoryBrowser.from_records(WINDOW_ID, tabs, groups)

    return _make


@pytest.fixture()
def stderr():
    return io.StringIO()
