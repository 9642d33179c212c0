"""Shared pytest fixtures."""

import pytest

from amarnote.config import Config
from amarnote.core.core import Core
from amarnote.core.storage import MemoryStore


@pytest.fixture
def config():
    """Default configuration, ignoring any local .env file."""
    return Config(_env_file=None)


@pytest.fixture
def store():
    """Empty in-memory store."""
    return MemoryStore()


@pytest.fixture
async def core(config, store):
    """Running core wired to the in-memory store."""
    core = Core(config, store)
    async with core.lifespan():
        yield core


@pytest.fixture
def services(core):
    """Shortcut to the service registry."""
    return core.services
