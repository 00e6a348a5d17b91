"""Core data model, configuration and reference tables."""

from .config import Settings, settings
from .geo import Coordinates, COUNTRY_REFERENCE_POINTS, haversine_km, reference_distance_km
from .models import (
    ArchetypeRecord,
    BuildingModifications,
    FinancialResult,
    RenovationScenario,
    WindowDistribution,
    extract_construction_period,
)
from .payload import BuildingPayload, BuildingSurface, SurfaceRole, SurfaceType, classify_surface

__all__ = [
    "Settings",
    "settings",
    "Coordinates",
    "COUNTRY_REFERENCE_POINTS",
    "haversine_km",
    "reference_distance_km",
    "ArchetypeRecord",
    "BuildingModifications",
    "FinancialResult",
    "RenovationScenario",
    "WindowDistribution",
    "extract_construction_period",
    "BuildingPayload",
    "BuildingSurface",
    "SurfaceRole",
    "SurfaceType",
    "classify_surface",
]
