"""Tenant vehicle pricing configuration endpoints"""
import logging
from fastapi import APIRouter, Depends, HTTPException, Query

from app.api.deps import get_car_pricing_repository, get_pricing_config_repository
from app.core.enums import ConfigSource
from app.core.response_builders import build_pricing_config_response, check_not_found
from app.schemas.pricing import PricingConfigOut, PricingConfigurationUpdate
from app.schemas.vehicle import MIN_VEHICLE_YEAR, MAX_VEHICLE_YEAR
from app.services.base_price import CarPricingRepository
from app.services.pricing_config import (
    DEFAULT_PRICING_CONFIGURATION,
    PricingConfigRepository,
    merge_with_defaults,
    normalize_tenant_id,
)
from app.utils.quote_cache import invalidate_tenant_quotes

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/tenants", tags=["pricing-config"])


@router.get("/{tenant_id}/pricing-config", response_model=PricingConfigOut)
async def get_pricing_config(
    tenant_id: str,
    repo: PricingConfigRepository = Depends(get_pricing_config_repository),
):
    tenant_id = normalize_tenant_id(tenant_id)
    row = await repo.get_active(tenant_id)
    if row is None or not row.config:
        return build_pricing_config_response(tenant_id, DEFAULT_PRICING_CONFIGURATION, ConfigSource.DEFAULT)

    return build_pricing_config_response(
        tenant_id, merge_with_defaults(row.config, tenant_id), ConfigSource.TENANT
    )


@router.put("/{tenant_id}/pricing-config", response_model=PricingConfigOut)
async def update_pricing_config(
    tenant_id: str,
    payload: PricingConfigurationUpdate,
    repo: PricingConfigRepository = Depends(get_pricing_config_repository),
):
    tenant_id = normalize_tenant_id(tenant_id)
    record = payload.to_record()
    if not record:
        raise HTTPException(status_code=400, detail="At least one pricing category is required")

    row = await repo.save(tenant_id, record)
    removed = await invalidate_tenant_quotes(tenant_id)
    logger.info(
        f"Updated pricing configuration for tenant {tenant_id} "
        f"({', '.join(sorted(record))}); {removed} cached quotes dropped"
    )

    return build_pricing_config_response(
        tenant_id, merge_with_defaults(row.config, tenant_id), ConfigSource.TENANT
    )


@router.delete("/{tenant_id}/pricing-config")
async def reset_pricing_config(
    tenant_id: str,
    repo: PricingConfigRepository = Depends(get_pricing_config_repository),
):
    tenant_id = normalize_tenant_id(tenant_id)
    reset = await repo.deactivate(tenant_id)
    check_not_found(reset, "Pricing configuration", tenant_id)

    await invalidate_tenant_quotes(tenant_id)
    logger.info(f"Reset pricing configuration for tenant {tenant_id} to defaults")
    return {"reset": True}


@router.get("/{tenant_id}/base-price")
async def get_base_price(
    tenant_id: str,
    brand: str = Query(..., min_length=1),
    model: str = Query(..., min_length=1),
    year: int = Query(..., ge=MIN_VEHICLE_YEAR, le=MAX_VEHICLE_YEAR),
    car_prices: CarPricingRepository = Depends(get_car_pricing_repository),
):
    tenant_id = normalize_tenant_id(tenant_id)
    price = await car_prices.find_base_price(tenant_id, brand, model, year)
    check_not_found(price is not None, "Base price", f"{brand} {model} {year}")
    return {"tenant_id": tenant_id, "brand": brand, "model": model, "year": year, "base_price": price}
