"""
Archetype catalog - cached access to the forecasting service archetypes.

The catalog is an explicit cache object: build one at the composition root
and pass it to whoever needs archetypes (matcher, CLI, services). The cache
is append-only for the lifetime of the object; ``reset()`` is the only way
to drop entries.

Concurrency: fetches suspend at the source boundary only. Two concurrent
first requests for the same key may both fetch; both results are identical
and the last write wins.

Usage:
    catalog = ArchetypeCatalog(ForecastingArchetypeSource())

    records = await catalog.list_filtered(country="Greece")
    details = await catalog.get_details(records[0])
    print(details.floor_area, details.thermal_properties.wall_u_value)
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from pydantic import ValidationError

from ..core.models import ArchetypeRecord
from ..core.payload import BuildingPayload
from ..ingest.forecasting_client import ArchetypeSource, RetrievalError

logger = logging.getLogger(__name__)


# =============================================================================
# DATA CLASSES
# =============================================================================

@dataclass(frozen=True)
class ThermalProperties:
    """Envelope U-value summary (W/m²K); 0 where the archetype has no such surface."""
    wall_u_value: float
    roof_u_value: float
    window_u_value: float


@dataclass(frozen=True)
class Setpoints:
    """Thermostat setpoints and setbacks (°C)."""
    heating_setpoint: float
    heating_setback: float
    cooling_setpoint: float
    cooling_setback: float


@dataclass(frozen=True)
class ArchetypeDetails:
    """
    Archetype summary plus its full technical payloads.

    Owned by the catalog cache. Never modify ``bui``/``system`` in place;
    the payload transformer always works on copies.
    """
    record: ArchetypeRecord
    floor_area: float  # m²
    number_of_floors: int
    building_height: float  # m
    total_window_area: float  # m²
    thermal_properties: ThermalProperties
    setpoints: Setpoints
    location: Tuple[float, float]  # (lat, lng) as reported upstream, unreliable
    bui: BuildingPayload
    system: Dict[str, Any]

    @property
    def category(self) -> str:
        return self.record.category

    @property
    def country(self) -> str:
        return self.record.country

    @property
    def name(self) -> str:
        return self.record.name

    @property
    def construction_period(self) -> Optional[str]:
        return self.record.construction_period


@dataclass
class BuildingOptions:
    """Dropdown values derived from the archetype listing."""
    countries: List[str] = field(default_factory=list)
    building_types: List[str] = field(default_factory=list)
    construction_periods: List[str] = field(default_factory=list)


# =============================================================================
# SUMMARY DERIVATION
# =============================================================================

def _wall_u_value(bui: BuildingPayload) -> float:
    for surface in bui.surfaces:
        if surface.is_opaque and "wall" in surface.name.lower():
            return surface.u_value
    return 0.0


def _roof_u_value(bui: BuildingPayload) -> float:
    for surface in bui.surfaces:
        if surface.is_opaque and "roof" in surface.name.lower():
            return surface.u_value
    return 0.0


def _window_u_value(bui: BuildingPayload) -> float:
    for surface in bui.surfaces:
        if surface.is_transparent:
            return surface.u_value
    return 0.0


def build_details(record: ArchetypeRecord, detail: Dict[str, Any]) -> ArchetypeDetails:
    """
    Ingest a detail response and derive the summary fields.

    Raises:
        KeyError, TypeError, ValueError: if the payload is malformed
    """
    bui = BuildingPayload.from_dict(detail["bui"])
    system = dict(detail["system"])
    setpoints = bui.temperature_setpoints

    return ArchetypeDetails(
        record=record,
        floor_area=bui.floor_area,
        number_of_floors=bui.number_of_floors,
        building_height=bui.height,
        total_window_area=bui.total_window_area,
        thermal_properties=ThermalProperties(
            wall_u_value=_wall_u_value(bui),
            roof_u_value=_roof_u_value(bui),
            window_u_value=_window_u_value(bui),
        ),
        setpoints=Setpoints(
            heating_setpoint=float(setpoints["heating_setpoint"]),
            heating_setback=float(setpoints["heating_setback"]),
            cooling_setpoint=float(setpoints["cooling_setpoint"]),
            cooling_setback=float(setpoints["cooling_setback"]),
        ),
        location=bui.location,
        bui=bui,
        system=system,
    )


# =============================================================================
# CATALOG
# =============================================================================

class ArchetypeCatalog:
    """
    Memoizing view over the archetype listing and per-archetype details.
    """

    def __init__(self, source: ArchetypeSource):
        self.source = source
        self._records: Optional[List[ArchetypeRecord]] = None
        self._details: Dict[str, ArchetypeDetails] = {}

    @property
    def is_loaded(self) -> bool:
        return self._records is not None

    @property
    def cached_detail_keys(self) -> List[str]:
        return list(self._details)

    def reset(self) -> None:
        """Drop every cached listing and detail entry."""
        self._records = None
        self._details.clear()

    async def list_all(self) -> List[ArchetypeRecord]:
        """
        Full archetype listing, fetched once per catalog lifetime.

        Raises:
            RetrievalError: upstream unreachable or listing malformed; the
                cache stays empty so the next call retries
        """
        if self._records is None:
            raw = await self.source.fetch_listing()
            try:
                records = [ArchetypeRecord.model_validate(item) for item in raw]
            except (ValidationError, TypeError) as e:
                raise RetrievalError(f"Malformed archetype listing: {e}") from e
            self._records = records
            logger.info(f"Cached {len(records)} archetypes")
        return list(self._records)

    async def list_filtered(
        self,
        country: Optional[str] = None,
        category: Optional[str] = None,
    ) -> List[ArchetypeRecord]:
        """Listing restricted to a country and/or category."""
        records = await self.list_all()
        if country:
            records = [r for r in records if r.country == country]
        if category:
            records = [r for r in records if r.category == category]
        return records

    async def get_details(self, record: ArchetypeRecord) -> ArchetypeDetails:
        """
        Full details of one archetype, cached by ``country:category:name``.

        Raises:
            NotFoundError: archetype does not exist upstream
            RetrievalError: transport failure or payload that cannot be ingested
        """
        key = record.cache_key
        cached = self._details.get(key)
        if cached is not None:
            return cached

        logger.debug("Fetching archetype details", extra={"archetype_id": key})
        detail = await self.source.fetch_detail(record)
        try:
            details = build_details(record, detail)
        except (KeyError, TypeError, ValueError) as e:
            raise RetrievalError(f"Malformed payload for archetype {key}: {e!r}") from e

        self._details[key] = details
        return details

    async def count_matching(
        self,
        category: Optional[str] = None,
        period: Optional[str] = None,
    ) -> int:
        """Number of archetypes in ``category`` whose name encodes ``period``."""
        records = await self.list_filtered(category=category)
        if period:
            records = [r for r in records if r.construction_period == period]
        return len(records)

    async def available_periods(self, category: str) -> List[str]:
        """Sorted construction periods available for a category."""
        records = await self.list_filtered(category=category)
        return sorted({r.construction_period for r in records if r.construction_period})

    async def get_options(self) -> BuildingOptions:
        """Country, building type and construction period dropdown values."""
        records = await self.list_all()
        return BuildingOptions(
            countries=sorted({r.country for r in records}),
            building_types=sorted({r.category for r in records}),
            construction_periods=sorted(
                {r.construction_period for r in records if r.construction_period}
            ),
        )


