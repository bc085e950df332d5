"""Pytest configuration and shared fixtures for tests."""

from collections.abc import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from taxcalc.main import app
from taxcalc.tax.year_config import TAX_YEAR_2024, TaxYearConfig


@pytest.fixture(scope="session")
def anyio_backend() -> str:
    """Use asyncio backend for async tests.

    Returns:
        Backend name string.
    """
    return "asyncio"


@pytest.fixture
def config_2024() -> TaxYearConfig:
    """2024 bracket tables."""
    return TAX_YEAR_2024


@pytest_asyncio.fixture
async def api_client() -> AsyncGenerator[AsyncClient, None]:
    """Create an async API client bound to the application."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client
