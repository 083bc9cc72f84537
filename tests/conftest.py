"""Shared test fixtures for pytest.

ENVIRONMENT is forced to "test" before any graphstream import so settings
never pick up a developer's .env.dev file.
"""

import os
from collections.abc import Generator

import pytest


os.environ["ENVIRONMENT"] = "test"

from graphstream.core.config import get_settings
from graphstream.schemas.graph_nodes import NodeRegistry

from tests.stream_factories import PRODUCT_VISION_NODES


@pytest.fixture(autouse=True)
def _fresh_settings() -> Generator[None, None, None]:
    """Drop cached settings so monkeypatched env vars take effect per test."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def registry() -> NodeRegistry:
    return NodeRegistry.from_mapping(PRODUCT_VISION_NODES)
