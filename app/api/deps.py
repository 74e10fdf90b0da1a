from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.session import get_db
from app.services.base_price import CarPricingRepository
from app.services.pricing_config import ConfigFetcher, PricingConfigRepository


def get_pricing_config_repository(db: AsyncSession = Depends(get_db)) -> PricingConfigRepository:
    return PricingConfigRepository(db)


def get_car_pricing_repository(db: AsyncSession = Depends(get_db)) -> CarPricingRepository:
    return CarPricingRepository(db)


def get_config_fetcher(
    repo: PricingConfigRepository = Depends(get_pricing_config_repository),
) -> ConfigFetcher:
    """Fetcher bound to the request's session."""
    async def fetch(tenant_id: str):
        row = await repo.get_active(tenant_id)
        return dict(row.config) if row is not None else None
    return fetch
