"""
Baseline Module - pick the reference archetype for a user's building.

- ArchetypeCatalog: cached archetype listing and technical payloads
- GeoMatcher: category / period / nearest-country matching
"""

from ..core.models import extract_construction_period
from .catalog import ArchetypeCatalog, ArchetypeDetails, BuildingOptions, Setpoints, ThermalProperties
from .matcher import ArchetypeMatchResult, CandidateSelection, GeoMatcher, rank_categories, select_candidate

__all__ = [
    'ArchetypeCatalog', 'ArchetypeDetails', 'BuildingOptions', 'Setpoints', 'ThermalProperties',
    'ArchetypeMatchResult', 'CandidateSelection', 'GeoMatcher', 'rank_categories', 'select_candidate',
    'extract_construction_period',
]
