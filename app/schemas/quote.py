from typing import Optional, Union
from pydantic import BaseModel, field_validator
from app.schemas.vehicle import VehicleInfo


class QuoteRequest(BaseModel):
    tenant_id: Union[str, int]
    vehicle: VehicleInfo
    base_price: Optional[float] = None
    brand: Optional[str] = None
    model: Optional[str] = None

    @field_validator("tenant_id")
    @classmethod
    def normalize_tenant_id(cls, value) -> str:
        return str(value).strip()


class QuickQuoteResponse(BaseModel):
    total_price: float
