"""
Pytest configuration and fixtures for relife-advisor tests.

Provides reusable test fixtures for:
- Archetype listings
- Forecasting-service building (BUI) and system payloads
- An in-memory archetype source standing in for the forecasting service
- Renovation scenarios and financial results
"""

import copy
import shutil
import tempfile
from pathlib import Path
from typing import Any, Dict, List, Optional

import pytest

from relife_advisor.baseline.catalog import ArchetypeCatalog, ArchetypeDetails, build_details
from relife_advisor.core.models import ArchetypeRecord, FinancialResult, RenovationScenario
from relife_advisor.core.payload import BuildingPayload
from relife_advisor.ingest.forecasting_client import NotFoundError


# =============================================================================
# PATH FIXTURES
# =============================================================================

@pytest.fixture
def temp_dir():
    """Temporary directory for test outputs, cleaned up after test."""
    tmp = tempfile.mkdtemp(prefix="relife_test_")
    yield Path(tmp)
    shutil.rmtree(tmp, ignore_errors=True)


# =============================================================================
# ARCHETYPE LISTING
# =============================================================================

ARCHETYPE_LISTING: List[Dict[str, str]] = [
    {"category": "Single Family House", "country": "Italy", "name": "SFH_Italy_1961_1980"},
    {"category": "Single Family House", "country": "Greece", "name": "SFH_Greece_1961_1980"},
    {"category": "Single Family House", "country": "Greece", "name": "SFH_Greece_1981_2000"},
    {"category": "Multi Family House", "country": "Italy", "name": "MFH_Italy_1946_1970"},
    {"category": "Office", "country": "Atlantis", "name": "Office_Atlantis"},
]


@pytest.fixture
def archetype_listing() -> List[Dict[str, str]]:
    """Raw listing as returned by GET /building/available."""
    return copy.deepcopy(ARCHETYPE_LISTING)


@pytest.fixture
def greek_record() -> ArchetypeRecord:
    return ArchetypeRecord(
        category="Single Family House",
        country="Greece",
        name="SFH_Greece_1961_1980",
    )


# =============================================================================
# PAYLOAD FIXTURES
# =============================================================================

def _opaque(name: str, area: float, u_value: float, azimuth: int, tilt: int, svf: float) -> Dict[str, Any]:
    return {
        "name": name,
        "type": "opaque",
        "area": area,
        "sky_view_factor": svf,
        "u_value": u_value,
        "solar_absorptance": 0.6,
        "thermal_capacity": 1416240.0,
        "orientation": {"azimuth": azimuth, "tilt": tilt},
        "name_adj_zone": None,
    }


def _window(name: str, area: float, azimuth: int) -> Dict[str, Any]:
    return {
        "name": name,
        "type": "transparent",
        "area": area,
        "sky_view_factor": 0.5,
        "u_value": 5.0,
        "g_value": 0.726,
        "height": 2,
        "width": area / 2,
        "parapet": 1.1,
        "orientation": {"azimuth": azimuth, "tilt": 90},
        "shading": False,
        "shading_type": "horizontal_overhang",
        "width_or_distance_of_shading_elements": 0.5,
        "overhang_proprieties": {"width_of_horizontal_overhangs": 1},
        "name_adj_zone": None,
    }


def make_bui(net_floor_area: float = 120.0) -> Dict[str, Any]:
    """
    Single-family house in Athens as the forecasting service describes it.

    Walls: 4 x 30 m² (120 m²), roof 130 m², slab 120 m², windows 16 m².
    """
    return {
        "building": {
            "name": "SFH_Greece_1961_1980",
            "azimuth_relative_to_true_north": 41.8,
            "latitude": 37.98,
            "longitude": 23.73,
            "exposed_perimeter": 44.0,
            "height": 3.0,
            "wall_thickness": 0.3,
            "n_floors": 1,
            "building_type_class": "Residential_single_family",
            "adj_zones_present": False,
            "number_adj_zone": 0,
            "net_floor_area": net_floor_area,
            "construction_class": "class_i",
        },
        "building_surface": [
            _opaque("Roof surface", 130.0, 2.2, 0, 0, 1.0),
            _opaque("Opaque north surface", 30.0, 1.4, 0, 90, 0.5),
            _opaque("Opaque south surface", 30.0, 1.4, 180, 90, 0.5),
            _opaque("Opaque east surface", 30.0, 1.2, 90, 90, 0.5),
            _opaque("Opaque west surface", 30.0, 1.2, 270, 90, 0.5),
            _opaque("Slab to ground", 120.0, 1.6, 0, 0, 0.0),
            _window("Transparent east surface", 4.0, 90),
            _window("Transparent west surface", 4.0, 270),
            _window("Transparent south surface", 8.0, 180),
        ],
        "units": {
            "area": "m²",
            "u_value": "W/m²K",
            "thermal_capacity": "J/kgK",
        },
        "building_parameters": {
            "temperature_setpoints": {
                "heating_setpoint": 20.0,
                "heating_setback": 17.0,
                "cooling_setpoint": 26.0,
                "cooling_setback": 30.0,
                "units": "°C",
            },
            "system_capacities": {
                "heating_capacity": 10000000.0,
                "cooling_capacity": 12000000.0,
                "units": "W",
            },
            "airflow_rates": {"infiltration_rate": 1.0, "units": "ACH"},
            "internal_gains": [
                {"name": "occupants", "full_load": 4.2, "weekday": [1.0] * 24, "weekend": [1.0] * 24},
            ],
        },
    }


SYSTEM_PAYLOAD: Dict[str, Any] = {
    "emitter_type": "Floor heating 1",
    "nominal_power": 8,
    "emission_efficiency": 90,
    "flow_temp_control_type": "Type 2 - Based on outdoor temperature",
    "heat_losses_recovered": True,
    "generator": {"type": "Condensing boiler", "efficiency": 0.92},
}


@pytest.fixture
def bui_dict() -> Dict[str, Any]:
    return make_bui()


@pytest.fixture
def system_dict() -> Dict[str, Any]:
    return copy.deepcopy(SYSTEM_PAYLOAD)


@pytest.fixture
def bui_payload(bui_dict) -> BuildingPayload:
    return BuildingPayload.from_dict(bui_dict)


@pytest.fixture
def greek_details(greek_record, bui_dict, system_dict) -> ArchetypeDetails:
    """Derived details of the 120 m² Greek single-family archetype."""
    return build_details(greek_record, {"bui": bui_dict, "system": system_dict})


# =============================================================================
# ARCHETYPE SOURCE
# =============================================================================

class FakeArchetypeSource:
    """
    In-memory stand-in for the forecasting service.

    Every listed archetype returns the Greek payload unless ``details``
    overrides it by cache key. Unlisted archetypes raise NotFoundError.
    """

    def __init__(
        self,
        listing: Optional[List[Dict[str, Any]]] = None,
        details: Optional[Dict[str, Dict[str, Any]]] = None,
    ):
        self.listing = listing if listing is not None else copy.deepcopy(ARCHETYPE_LISTING)
        self.details = details or {}
        self.listing_calls = 0
        self.detail_calls = 0
        self.listing_error: Optional[Exception] = None
        self.detail_error: Optional[Exception] = None

    async def fetch_listing(self) -> List[Dict[str, Any]]:
        self.listing_calls += 1
        if self.listing_error is not None:
            raise self.listing_error
        return copy.deepcopy(self.listing)

    async def fetch_detail(self, record: ArchetypeRecord) -> Dict[str, Any]:
        self.detail_calls += 1
        if self.detail_error is not None:
            raise self.detail_error
        if record.cache_key in self.details:
            return copy.deepcopy(self.details[record.cache_key])
        if record.model_dump() not in self.listing:
            raise NotFoundError(f"Unknown archetype {record.cache_key}")
        return {"bui": make_bui(), "system": copy.deepcopy(SYSTEM_PAYLOAD)}


@pytest.fixture
def source_factory():
    """FakeArchetypeSource class, for tests that need a custom listing or payload."""
    return FakeArchetypeSource


@pytest.fixture
def bui_factory():
    return make_bui


@pytest.fixture
def fake_source() -> FakeArchetypeSource:
    return FakeArchetypeSource()


@pytest.fixture
def catalog(fake_source) -> ArchetypeCatalog:
    return ArchetypeCatalog(fake_source)


# =============================================================================
# SCENARIO FIXTURES
# =============================================================================

@pytest.fixture
def scenarios() -> List[RenovationScenario]:
    """Current state plus three renovation packages."""
    return [
        RenovationScenario(
            id="current", label="Current Status", epc_class="E",
            annual_energy_needs=20000.0, comfort_index=55.0,
        ),
        RenovationScenario(
            id="envelope", label="Envelope insulation", epc_class="C",
            annual_energy_needs=12000.0, comfort_index=75.0,
            measures=["wall_insulation", "roof_insulation"],
        ),
        RenovationScenario(
            id="deep", label="Deep renovation", epc_class="A",
            annual_energy_needs=6000.0, comfort_index=85.0,
            measures=["wall_insulation", "roof_insulation", "window_replacement", "heat_pump"],
        ),
        RenovationScenario(
            id="windows", label="Window replacement", epc_class="D",
            annual_energy_needs=17000.0, comfort_index=65.0,
            measures=["window_replacement"],
        ),
    ]


@pytest.fixture
def financial_results() -> Dict[str, FinancialResult]:
    return {
        "envelope": FinancialResult(return_on_investment=0.8, net_present_value=25000.0,
                                    capital_expenditure=30000.0, payback_time=12.0),
        "deep": FinancialResult(return_on_investment=0.4, net_present_value=-10000.0,
                                capital_expenditure=90000.0, payback_time=25.0),
        "windows": FinancialResult(return_on_investment=1.2, net_present_value=15000.0,
                                   capital_expenditure=12000.0, payback_time=8.0),
    }
