"""Pricing quote endpoints with Redis caching"""
import logging
from fastapi import APIRouter, Depends

from app.api.deps import get_car_pricing_repository, get_config_fetcher
from app.schemas.pricing import PricingResult
from app.schemas.quote import QuoteRequest, QuickQuoteResponse
from app.services.base_price import CarPricingRepository
from app.services.pricing import VehiclePricingCalculator
from app.services.pricing_config import ConfigFetcher
from app.utils.quote_cache import get_cached_quote, quote_cache_key, set_cached_quote

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/quotes", tags=["quotes"])


async def _resolve_base_price(req: QuoteRequest, car_prices: CarPricingRepository) -> float:
    if req.base_price is not None:
        return req.base_price

    if req.brand and req.model:
        price = await car_prices.find_base_price(req.tenant_id, req.brand, req.model, req.vehicle.year)
        if price is not None:
            return price

    return 0.0


@router.post("/calc", response_model=PricingResult)
async def calc_quote(
    req: QuoteRequest,
    fetcher: ConfigFetcher = Depends(get_config_fetcher),
    car_prices: CarPricingRepository = Depends(get_car_pricing_repository),
):
    cache_key = quote_cache_key(req.tenant_id, req.model_dump(mode="json"))
    cached = await get_cached_quote(cache_key)
    if cached:
        return PricingResult.model_validate(cached)

    base_price = await _resolve_base_price(req, car_prices)
    result = await VehiclePricingCalculator.get_price_breakdown(
        req.tenant_id, req.vehicle, base_price, fetcher=fetcher
    )

    await set_cached_quote(cache_key, result.model_dump(mode="json"))
    return result


@router.post("/quick", response_model=QuickQuoteResponse)
async def quick_quote(
    req: QuoteRequest,
    fetcher: ConfigFetcher = Depends(get_config_fetcher),
    car_prices: CarPricingRepository = Depends(get_car_pricing_repository),
):
    base_price = await _resolve_base_price(req, car_prices)
    total = await VehiclePricingCalculator.get_quick_price(
        req.tenant_id, req.vehicle, base_price, fetcher=fetcher
    )
    return QuickQuoteResponse(total_price=total)
