"""Shared fixtures: a temporary store, a signed-up user and their repository."""

import pytest

from fleet import FleetRepository, Store
from fleet.auth import create_user


@pytest.fixture
def store(tmp_path):
    return Store(tmp_path / "fleet.yaml")


@pytest.fixture
def user(store):
    return create_user(store, "ana@example.com", "secret", "Ana")


@pytest.fixture
def repo(store, user):
    return FleetRepository(store, user)
