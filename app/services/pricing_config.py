"""Tenant pricing configuration: defaults, storage access and the memoized loader"""
import asyncio
import logging
from typing import Awaitable, Callable, Optional, Union

from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from app.core.config import settings
from app.core.enums import ConfigSource
from app.core.metrics import pricing_config_loads, track_db_operation
from app.db.session import AsyncSessionLocal
from app.models.pricing_config import TenantPricingConfig
from app.schemas.pricing import (
    AgeBonuses,
    DistanceAdjustments,
    FuelAdjustments,
    OldCarDeduction,
    PartsBonuses,
    PricingConfiguration,
)

logger = logging.getLogger(__name__)

# Given a normalized tenant id, returns the stored camelCase record or None.
ConfigFetcher = Callable[[str], Awaitable[Optional[dict]]]

DEFAULT_PRICING_CONFIGURATION = PricingConfiguration(
    age_bonuses=AgeBonuses(
        age0to5=10000,
        age5to10=5000,
        age10to15=2500,
        age15to20=1000,
        age20plus=0,
    ),
    old_car_deduction=OldCarDeduction(before1990=-1000),
    distance_adjustments=DistanceAdjustments(
        dropoff_complete=500,
        dropoff_incomplete=0,
        pickup0to20=-250,
        pickup20to50=-500,
        pickup50to75=-1000,
        pickup75to100=-1250,
        pickup100plus=-2500,
    ),
    parts_bonuses=PartsBonuses(
        engine_transmission_catalyst=1000,
        battery_wheels_other=500,
    ),
    fuel_adjustments=FuelAdjustments(
        gasoline=0,
        ethanol=0,
        electric=0,
        other=-500,
    ),
)


def normalize_tenant_id(tenant_id: Union[str, int]) -> str:
    return str(tenant_id).strip()


def merge_with_defaults(record: Optional[dict], tenant_id: str = "") -> PricingConfiguration:
    """Build a full configuration from a stored tenant record.

    Categories are taken wholesale: a category present in the record replaces
    the default category entirely, an absent one keeps the default. A present
    category that is incomplete or non-numeric is treated as absent. Values are
    used as stored; the admin ranges are only enforced on updates.
    """
    if not record:
        return DEFAULT_PRICING_CONFIGURATION
    if not isinstance(record, dict):
        logger.warning(f"Pricing configuration for tenant {tenant_id} is not a mapping, using defaults")
        return DEFAULT_PRICING_CONFIGURATION

    categories = {}
    for field_name, field in PricingConfiguration.model_fields.items():
        default = getattr(DEFAULT_PRICING_CONFIGURATION, field_name)
        raw = record.get(field.alias)
        if raw is None:
            raw = record.get(field_name)

        if raw is None:
            categories[field_name] = default
            continue

        try:
            categories[field_name] = field.annotation.model_validate(raw)
        except ValidationError as e:
            logger.warning(
                f"Invalid '{field.alias}' pricing category for tenant {tenant_id}, "
                f"using defaults: {e.error_count()} error(s)"
            )
            categories[field_name] = default

    return PricingConfiguration(**categories)


class PricingConfigRepository:
    """Reads and writes the tenant's vehicle pricing record."""

    def __init__(self, db: AsyncSession, pricing_type: Optional[str] = None):
        self.db = db
        self.pricing_type = pricing_type or settings.VEHICLE_PRICING_TYPE

    def _active_query(self, tenant_id: str):
        return (
            select(TenantPricingConfig)
            .where(TenantPricingConfig.tenant_id == tenant_id)
            .where(TenantPricingConfig.pricing_type == self.pricing_type)
            .where(TenantPricingConfig.is_active.is_(True))
            .order_by(TenantPricingConfig.id.desc())
        )

    @track_db_operation("select", "tenant_pricing_configs")
    async def get_active(self, tenant_id: str) -> Optional[TenantPricingConfig]:
        res = await self.db.execute(self._active_query(tenant_id).limit(1))
        return res.scalars().first()

    @track_db_operation("upsert", "tenant_pricing_configs")
    async def save(self, tenant_id: str, record: dict) -> TenantPricingConfig:
        res = await self.db.execute(self._active_query(tenant_id).limit(1))
        row = res.scalars().first()

        if row is None:
            row = TenantPricingConfig(
                tenant_id=tenant_id,
                pricing_type=self.pricing_type,
                config=record,
                is_active=True,
            )
        else:
            # Supplied categories replace the stored ones; the rest are kept.
            row.config = {**(row.config or {}), **record}

        self.db.add(row)
        await self.db.commit()
        await self.db.refresh(row)
        return row

    @track_db_operation("delete", "tenant_pricing_configs")
    async def deactivate(self, tenant_id: str) -> bool:
        res = await self.db.execute(self._active_query(tenant_id))
        rows = res.scalars().all()
        if not rows:
            return False

        for row in rows:
            row.is_active = False
            self.db.add(row)
        await self.db.commit()
        return True


async def fetch_tenant_pricing_config(tenant_id: str) -> Optional[dict]:
    async with AsyncSessionLocal() as db:
        row = await PricingConfigRepository(db).get_active(tenant_id)
        return dict(row.config) if row is not None else None


class PricingConfigLoader:
    """Loads one tenant's configuration once and keeps it for its lifetime.

    Fetch errors, timeouts and missing records all resolve to the default
    configuration; nothing is raised to the caller. Concurrent first calls
    share a single fetch.
    """

    def __init__(
        self,
        tenant_id: Union[str, int],
        fetcher: Optional[ConfigFetcher] = None,
        timeout: Optional[float] = None,
    ):
        self.tenant_id = normalize_tenant_id(tenant_id)
        self._fetcher = fetcher or fetch_tenant_pricing_config
        self._timeout = settings.PRICING_CONFIG_FETCH_TIMEOUT if timeout is None else timeout
        self._config: Optional[PricingConfiguration] = None
        self._source: Optional[ConfigSource] = None
        self._lock = asyncio.Lock()

    @property
    def loaded(self) -> bool:
        return self._config is not None

    @property
    def source(self) -> Optional[ConfigSource]:
        return self._source

    async def get(self) -> PricingConfiguration:
        if self._config is not None:
            return self._config

        async with self._lock:
            if self._config is None:
                self._config, self._source = await self._load()
        return self._config

    async def refresh(self) -> PricingConfiguration:
        """Drop the cached configuration and load it again."""
        async with self._lock:
            self._config = None
            self._source = None
        return await self.get()

    async def _load(self) -> tuple[PricingConfiguration, ConfigSource]:
        try:
            record = await asyncio.wait_for(self._fetcher(self.tenant_id), timeout=self._timeout)
        except asyncio.TimeoutError:
            logger.warning(
                f"Pricing configuration fetch for tenant {self.tenant_id} timed out "
                f"after {self._timeout}s, using defaults"
            )
            pricing_config_loads.labels(source="timeout").inc()
            return DEFAULT_PRICING_CONFIGURATION, ConfigSource.DEFAULT
        except Exception as e:
            logger.warning(
                f"Pricing configuration fetch for tenant {self.tenant_id} failed, using defaults: {e}",
                exc_info=True
            )
            pricing_config_loads.labels(source="error").inc()
            return DEFAULT_PRICING_CONFIGURATION, ConfigSource.DEFAULT

        if not record:
            logger.info(f"No vehicle pricing configuration for tenant {self.tenant_id}, using defaults")
            pricing_config_loads.labels(source=ConfigSource.DEFAULT.value).inc()
            return DEFAULT_PRICING_CONFIGURATION, ConfigSource.DEFAULT

        pricing_config_loads.labels(source=ConfigSource.TENANT.value).inc()
        return merge_with_defaults(record, self.tenant_id), ConfigSource.TENANT
