"""Service test fixtures — the wired dispatcher over the seeded store."""

import pytest


@pytest.fixture
def dispatch(runtime):
    return runtime.dispatch
