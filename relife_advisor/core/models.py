"""
Pydantic models for data exchanged with the ReLIFE services.

Covers the archetype listing records returned by the forecasting service,
the user-facing building modifications, and the per-scenario outcomes
(energy simulation and financial risk) consumed by the decision step.
"""

from __future__ import annotations

import re
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


# Archetype names embed their construction period, e.g. "SFH_Greece_1961_1980"
PERIOD_PATTERN = re.compile(r"(\d{4})_(\d{4})")


def extract_construction_period(archetype_name: str) -> Optional[str]:
    """Return "1961-1980" for a name containing "1961_1980", else None."""
    match = PERIOD_PATTERN.search(archetype_name)
    return f"{match.group(1)}-{match.group(2)}" if match else None


# =============================================================================
# ARCHETYPES
# =============================================================================


class ArchetypeRecord(BaseModel):
    """One entry of the archetype listing. Unique on (category, country, name)."""

    model_config = ConfigDict(frozen=True)

    category: str = Field(description='Building category, e.g. "Single Family House"')
    country: str = Field(description='Country name, e.g. "Greece"')
    name: str = Field(description="Archetype identifier")

    @property
    def cache_key(self) -> str:
        return f"{self.country}:{self.category}:{self.name}"

    @property
    def construction_period(self) -> Optional[str]:
        return extract_construction_period(self.name)


# =============================================================================
# BUILDING MODIFICATIONS
# =============================================================================


class WindowDistribution(BaseModel):
    """Share of window area per facade orientation (percent, 0-100)."""

    north: float = 25.0
    south: float = 25.0
    east: float = 25.0
    west: float = 25.0


class BuildingModifications(BaseModel):
    """
    User-facing overrides applied on top of an archetype.

    Every field is optional; an absent field keeps the archetype default.
    Range checks live in ``ecm.constraints.validate_modifications`` so that
    all violations can be reported together.
    """

    # Geometry
    floor_area: Optional[float] = Field(default=None, description="Net floor area (m²)")
    number_of_floors: Optional[int] = None
    building_height: Optional[float] = Field(default=None, description="Building height (m)")

    # Windows
    total_window_area: Optional[float] = Field(default=None, description="Total window area (m²)")
    window_distribution: Optional[WindowDistribution] = None

    # Thermal properties (W/m²K)
    wall_u_value: Optional[float] = None
    roof_u_value: Optional[float] = None
    window_u_value: Optional[float] = None

    # Setpoints (°C)
    heating_setpoint: Optional[float] = None
    cooling_setpoint: Optional[float] = None

    # Occupancy
    number_of_occupants: Optional[int] = None

    @property
    def has_thermal_changes(self) -> bool:
        return any(
            value is not None
            for value in (self.wall_u_value, self.roof_u_value, self.window_u_value)
        )

    @property
    def has_setpoint_changes(self) -> bool:
        return self.heating_setpoint is not None or self.cooling_setpoint is not None


# =============================================================================
# SCENARIO OUTCOMES
# =============================================================================


class RenovationScenario(BaseModel):
    """Simulated outcome of one renovation scenario ("current" is the baseline)."""

    id: str
    label: str = ""
    epc_class: str
    annual_energy_needs: float = Field(description="HVAC energy demand (kWh/year)")
    comfort_index: float = Field(description="Comfort index, 0-100")
    annual_energy_cost: Optional[float] = Field(default=None, description="EUR/year")
    heating_cooling_needs: Optional[float] = Field(default=None, description="kWh/year")
    flexibility_index: Optional[float] = None
    measures: list[str] = Field(default_factory=list)


class FinancialResult(BaseModel):
    """Financial indicators of one scenario from the financial-risk service."""

    return_on_investment: float = Field(default=0.0, description="ROI as a fraction (1.42 = 142%)")
    net_present_value: float = Field(default=0.0, description="NPV (EUR)")
    capital_expenditure: float = Field(default=0.0, description="CAPEX (EUR)")
    payback_time: float = Field(default=0.0, description="Payback period (years)")
    after_renovation_value: float = Field(default=0.0, description="ARV (EUR)")

    @classmethod
    def from_risk_assessment(
        cls,
        response: dict[str, Any],
        arv: Optional[dict[str, Any]] = None,
    ) -> "FinancialResult":
        """
        Build from a risk-assessment response.

        Point forecasts are the P50 values; missing indicators default to 0.
        """
        forecasts = response.get("point_forecasts") or {}
        metadata = response.get("metadata") or {}
        return cls(
            return_on_investment=forecasts.get("ROI") or 0.0,
            net_present_value=forecasts.get("NPV") or 0.0,
            payback_time=forecasts.get("PBP") or 0.0,
            capital_expenditure=metadata.get("capex") or 0.0,
            after_renovation_value=(arv or {}).get("total_price") or 0.0,
        )
