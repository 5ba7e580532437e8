"""Shared pytest configuration for meddle tests."""

import pytest


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"
