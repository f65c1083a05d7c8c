from __future__ import annotations

import logging

import pytest

from macos_setup.catalog import load_catalog
from tests.fakes import Captured


@pytest.fixture
def console() -> Captured:
    return Captured()


@pytest.fixture
def software():
    return load_catalog("software")


@pytest.fixture
def system():
    return load_catalog("system")


@pytest.fixture
def config_path(tmp_path):
    return str(tmp_path / ".macos-setup.cfg")


@pytest.fixture(autouse=True)
def _reset_root_logging():
    root = logging.getLogger()
    before = list(root.handlers)
    yield
    for h in list(root.handlers):
        if h not in before:
            root.removeHandler(h)
            h.close()
