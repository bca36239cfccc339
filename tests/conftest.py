"""Shared fixtures: an in-process live server and the URL the suites target."""
from typing import Generator

import pytest

from hello_world.app import create_app
from hello_world.config import Settings, get_settings
from hello_world.server import LiveServer


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "e2e: marks tests that talk to a live server over HTTP"
    )


@pytest.fixture
def settings() -> Settings:
    """Settings with defaults, ignoring any .env file."""
    return Settings(_env_file=None)


@pytest.fixture
def live_server(settings: Settings) -> Generator[LiveServer, None, None]:
    """Serve the real app on an ephemeral loopback port for one test."""
    with LiveServer(create_app(settings)) as server:
        yield server


@pytest.fixture
def api_url() -> Generator[str, None, None]:
    """Get API URL from the environment, or start the app in-process."""
    configured = get_settings().api_base_url
    if configured:
        yield configured
        return
    with LiveServer(create_app()) as server:
        yield server.url
