from fastapi import HTTPException
from typing import Optional
from app.core.enums import ConfigSource
from app.schemas.pricing import PricingConfigOut, PricingConfiguration


def check_not_found(item, resource_name: str = "Resource", resource_id: Optional[str] = None) -> None:

    if not item:
        if resource_id:
            raise HTTPException(
                status_code=404,
                detail=f"{resource_name} for {resource_id} not found"
            )
        raise HTTPException(status_code=404, detail=f"{resource_name} not found")


def build_pricing_config_response(
    tenant_id: str,
    config: PricingConfiguration,
    source: ConfigSource,
) -> PricingConfigOut:
    return PricingConfigOut(
        tenant_id=tenant_id,
        source=source,
        config=config,
    )
