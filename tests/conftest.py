"""Shared fixtures. The authority service runs on an in-memory database."""

import os

os.environ["COTRA_IN_MEMORY"] = "1"

import pytest

from cotra.protocol.authority import Authority
from cotra.protocol.identity import Identity


@pytest.fixture
def authority():
    return Authority.unique()


@pytest.fixture
def other_authority():
    return Authority.unique()


@pytest.fixture
def identity():
    return Identity.unique()
