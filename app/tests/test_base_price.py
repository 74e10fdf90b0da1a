import pytest
from datetime import date
from unittest.mock import AsyncMock, MagicMock

from app.models.car_pricing import CarPricing
from app.services.base_price import CarPricingRepository, select_base_price

ON = date(2024, 6, 1)


def row(base_price, year_from=None, year_to=None, effective_from=date(2024, 1, 1), effective_to=None):
    return CarPricing(
        tenant_id="1",
        brand="Volvo",
        model="V70",
        base_price=base_price,
        year_from=year_from,
        year_to=year_to,
        effective_from=effective_from,
        effective_to=effective_to,
    )


class TestSelectBasePrice:

    def test_no_rows(self):
        assert select_base_price([], 2010, ON) is None

    def test_open_year_range_matches_any_year(self):
        assert select_base_price([row(3000)], 1975, ON) == 3000

    def test_year_outside_range(self):
        assert select_base_price([row(3000, 2000, 2005)], 2010, ON) is None

    def test_narrowest_year_range_wins(self):
        rows = [row(2000), row(2500, 2000, 2015), row(2800, 2008, 2012)]
        assert select_base_price(rows, 2010, ON) == 2800

    def test_range_bounds_inclusive(self):
        rows = [row(2500, 2000, 2015)]
        assert select_base_price(rows, 2000, ON) == 2500
        assert select_base_price(rows, 2015, ON) == 2500

    def test_expired_and_future_rows_ignored(self):
        rows = [
            row(1000, effective_from=date(2023, 1, 1), effective_to=date(2023, 12, 31)),
            row(9000, effective_from=date(2025, 1, 1)),
        ]
        assert select_base_price(rows, 2010, ON) is None

    def test_latest_effective_row_wins(self):
        rows = [
            row(2000, effective_from=date(2023, 1, 1)),
            row(2200, effective_from=date(2024, 3, 1)),
        ]
        assert select_base_price(rows, 2010, ON) == 2200


class TestCarPricingRepository:

    @pytest.mark.asyncio
    async def test_find_base_price(self):
        result = MagicMock()
        result.scalars.return_value.all.return_value = [row(2500, 2000, 2015)]
        db = MagicMock()
        db.execute = AsyncMock(return_value=result)

        price = await CarPricingRepository(db).find_base_price("1", "volvo ", "v70", 2010, on=ON)

        assert price == 2500
        db.execute.assert_awaited_once()
