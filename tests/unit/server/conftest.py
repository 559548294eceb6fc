"""Fixtures for the HTTP surface."""

import pytest
from fastapi.testclient import TestClient

from timeoff.config.models import ChannelsConfig, TimeoffConfig
from timeoff.server.api import create_app


@pytest.fixture
def test_client(monkeypatch):
    """Client around the app with an in-memory bot and no recognizer credentials."""
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    config = TimeoffConfig(channels=ChannelsConfig(default_user_id="U-DEFAULT"))
    with TestClient(create_app(config)) as client:
        yield client
