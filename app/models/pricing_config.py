from sqlalchemy import Column, String, Boolean, JSON
from app.models.base import BaseModel


class TenantPricingConfig(BaseModel):
    __tablename__ = "tenant_pricing_configs"

    tenant_id = Column(String(64), nullable=False, index=True)
    pricing_type = Column(String(40), nullable=False, default="vehicle_pricing")
    config = Column(JSON, nullable=False, default=dict)
    is_active = Column(Boolean, nullable=False, default=True)
