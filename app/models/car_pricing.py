from sqlalchemy import Column, String, Integer, Float, Date
from app.models.base import BaseModel


class CarPricing(BaseModel):
    __tablename__ = "car_pricing"

    tenant_id = Column(String(64), nullable=False, index=True)
    brand = Column(String(80), nullable=False)
    model = Column(String(120), nullable=False)
    year_from = Column(Integer, nullable=True)
    year_to = Column(Integer, nullable=True)
    base_price = Column(Float, nullable=False)
    price_per_kg = Column(Float, nullable=True)
    effective_from = Column(Date, nullable=False)
    effective_to = Column(Date, nullable=True)
