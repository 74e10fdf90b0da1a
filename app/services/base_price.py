"""Base price lookup from the tenant's brand/model price list"""
import logging
from datetime import date
from typing import Iterable, Optional

from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from app.core.metrics import track_db_operation
from app.models.car_pricing import CarPricing

logger = logging.getLogger(__name__)


def _covers_year(row: CarPricing, year: int) -> bool:
    if row.year_from is not None and year < row.year_from:
        return False
    if row.year_to is not None and year > row.year_to:
        return False
    return True


def _is_effective(row: CarPricing, on: date) -> bool:
    if row.effective_from > on:
        return False
    return row.effective_to is None or row.effective_to >= on


def _year_span(row: CarPricing) -> float:
    if row.year_from is None or row.year_to is None:
        return float("inf")
    return row.year_to - row.year_from


def select_base_price(rows: Iterable[CarPricing], year: int, on: Optional[date] = None) -> Optional[float]:
    """Pick the base price that applies to ``year`` on date ``on``.

    Narrower year ranges win over broader ones; among equals the most
    recently effective row wins.
    """
    on = on or date.today()
    candidates = [r for r in rows if _is_effective(r, on) and _covers_year(r, year)]
    if not candidates:
        return None

    best = min(candidates, key=lambda r: (_year_span(r), -r.effective_from.toordinal()))
    return best.base_price


class CarPricingRepository:

    def __init__(self, db: AsyncSession):
        self.db = db

    @track_db_operation("select", "car_pricing")
    async def find_base_price(
        self,
        tenant_id: str,
        brand: str,
        model: str,
        year: int,
        on: Optional[date] = None,
    ) -> Optional[float]:
        q = (
            select(CarPricing)
            .where(CarPricing.tenant_id == tenant_id)
            .where(func.lower(CarPricing.brand) == brand.strip().lower())
            .where(func.lower(CarPricing.model) == model.strip().lower())
        )
        res = await self.db.execute(q)
        price = select_base_price(res.scalars().all(), year, on)
        if price is None:
            logger.info(f"No base price for {brand} {model} ({year}) at tenant {tenant_id}")
        return price
