"""Fixtures for HTTP-level tests."""

import pytest
from fastapi.testclient import TestClient

from poportal.app import App
from poportal.web.server import create_fastapi_app


@pytest.fixture
def portal(config, store, clock):
    return App(config, store=store, clock=clock)


@pytest.fixture
def fastapi_app(portal, config):
    return create_fastapi_app(portal, config)


@pytest.fixture
def client(fastapi_app):
    with TestClient(fastapi_app) as client:
        yield client
