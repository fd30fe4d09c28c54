"""Shared fixtures: configuration, the stub provider, registry and dispatcher."""

from __future__ import annotations

import pytest

from kagimcp.config import ServerConfig, resolve_config
from kagimcp.tools.dispatcher import ToolDispatcher
from kagimcp.tools.registry import ToolRegistry
from tests.helpers import API_KEY, StubProvider


@pytest.fixture
def config() -> ServerConfig:
    return resolve_config(api_key=API_KEY)


@pytest.fixture
def provider() -> StubProvider:
    return StubProvider()


@pytest.fixture
def registry(config: ServerConfig) -> ToolRegistry:
    return ToolRegistry.from_flags(config.tools)


@pytest.fixture
def dispatcher(registry: ToolRegistry, provider: StubProvider, config: ServerConfig) -> ToolDispatcher:
    return ToolDispatcher(registry, provider, config)


