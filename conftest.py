import asyncio
from types import SimpleNamespace
from typing import Optional

import pytest
from httpx import AsyncClient, ASGITransport

from app.main import app
from app.api.deps import get_car_pricing_repository, get_pricing_config_repository


class FakePricingConfigRepository:
    """In-memory stand-in for the tenant_pricing_configs table."""

    def __init__(self, records: Optional[dict] = None):
        self.records = dict(records or {})
        self.saved = []

    async def get_active(self, tenant_id: str):
        record = self.records.get(tenant_id)
        if record is None:
            return None
        return SimpleNamespace(tenant_id=tenant_id, config=record, is_active=True)

    async def save(self, tenant_id: str, record: dict):
        self.records[tenant_id] = {**self.records.get(tenant_id, {}), **record}
        self.saved.append((tenant_id, dict(record)))
        return SimpleNamespace(tenant_id=tenant_id, config=self.records[tenant_id], is_active=True)

    async def deactivate(self, tenant_id: str) -> bool:
        return self.records.pop(tenant_id, None) is not None


class FakeCarPricingRepository:
    """Base prices keyed by (tenant_id, brand, model), case-insensitive."""

    def __init__(self, prices: Optional[dict] = None):
        self.prices = {
            (tenant, brand.lower(), model.lower()): price
            for (tenant, brand, model), price in (prices or {}).items()
        }
        self.lookups = []

    async def find_base_price(self, tenant_id, brand, model, year, on=None):
        self.lookups.append((tenant_id, brand, model, year))
        return self.prices.get((tenant_id, brand.strip().lower(), model.strip().lower()))


def _make_fetcher(record=None, error: Optional[Exception] = None, delay: float = 0.0):
    calls = []

    async def fetch(tenant_id: str):
        calls.append(tenant_id)
        if delay:
            await asyncio.sleep(delay)
        if error is not None:
            raise error
        return record

    fetch.calls = calls
    return fetch


@pytest.fixture
def make_fetcher():
    """Factory for tenant configuration fetchers that record their calls."""
    return _make_fetcher


@pytest.fixture
def config_repo():
    return FakePricingConfigRepository()


@pytest.fixture
def car_price_repo():
    return FakeCarPricingRepository({("1", "Volvo", "V70"): 3000.0})


@pytest.fixture
def test_client(config_repo, car_price_repo):
    app.dependency_overrides[get_pricing_config_repository] = lambda: config_repo
    app.dependency_overrides[get_car_pricing_repository] = lambda: car_price_repo
    yield AsyncClient(transport=ASGITransport(app=app), base_url="http://test")
    app.dependency_overrides.clear()


@pytest.fixture
def custom_age_bonuses():
    return {
        "age0to5": 20000,
        "age5to10": 8000,
        "age10to15": 4000,
        "age15to20": 2000,
        "age20plus": 500,
    }


def pytest_configure(config):
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
    config.addinivalue_line(
        "markers", "api: marks tests that go through the HTTP layer"
    )
    config.addinivalue_line(
        "markers", "pricing: marks tests related to pricing rules"
    )
    config.addinivalue_line(
        "markers", "config: marks tests related to tenant pricing configuration"
    )
