"""Shared pytest fixtures."""

import pytest
from support import FakeClock, make_config

from poportal.core.core import Core
from poportal.core.modules.session.store import InMemorySessionStore


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def config():
    return make_config()


@pytest.fixture
def store():
    return InMemorySessionStore()


@pytest.fixture
def core(config, store, clock):
    return Core(config, store=store, clock=clock)


@pytest.fixture
def session_service(core):
    return core.services.session
