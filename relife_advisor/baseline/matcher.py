"""
Geographic archetype matcher.

Matching policy:
1. Category is a hard filter - no archetype of the category, no match.
2. Construction period is a soft filter - if nothing in the category has the
   requested period, the whole category stays in play.
3. Geography decides among the remaining candidates - nearest country
   reference point (capital city), first in catalog order on ties.
   Per-archetype coordinates are not used; they are unreliable upstream.

Without coordinates the first remaining candidate in catalog order wins.
The result records which filters actually narrowed the candidates so the
fallbacks are visible to callers and tests.

Usage:
    matcher = GeoMatcher(catalog)
    result = await matcher.find_best(
        "Single Family House",
        period="1961-1980",
        coordinates=Coordinates(37.98, 23.73),
    )
    if result:
        print(result.record.name, result.distance_km, result.period_filter_applied)
"""

import logging
import math
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

from ..core.geo import Coordinates, reference_distance_km
from ..core.models import ArchetypeRecord
from ..ingest.forecasting_client import NotFoundError
from .catalog import ArchetypeCatalog, ArchetypeDetails

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CandidateSelection:
    """Outcome of the matching policy over the listing."""
    record: ArchetypeRecord
    candidate_count: int
    period_filter_applied: bool  # False when no period given or the period fell back
    geography_applied: bool
    distance_km: Optional[float] = None  # inf when the country has no reference point


@dataclass(frozen=True)
class ArchetypeMatchResult:
    """Best archetype with its details and how it was chosen."""
    selection: CandidateSelection
    details: ArchetypeDetails

    @property
    def record(self) -> ArchetypeRecord:
        return self.selection.record

    @property
    def period_filter_applied(self) -> bool:
        return self.selection.period_filter_applied

    @property
    def geography_applied(self) -> bool:
        return self.selection.geography_applied

    @property
    def distance_km(self) -> Optional[float]:
        return self.selection.distance_km


def select_candidate(
    records: Sequence[ArchetypeRecord],
    category: str,
    period: Optional[str] = None,
    coordinates: Optional[Coordinates] = None,
) -> Optional[CandidateSelection]:
    """
    Apply the matching policy to a listing.

    Returns:
        CandidateSelection, or None if the category has no archetypes
    """
    in_category = [r for r in records if r.category == category]
    if not in_category:
        return None

    candidates = in_category
    period_applied = False
    if period:
        in_period = [r for r in in_category if r.construction_period == period]
        if in_period:
            candidates = in_period
            period_applied = True
        else:
            logger.info(
                f"No archetype for period {period}, using all {len(in_category)} in category",
                extra={"category": category},
            )

    if coordinates is None:
        return CandidateSelection(
            record=candidates[0],
            candidate_count=len(candidates),
            period_filter_applied=period_applied,
            geography_applied=False,
        )

    best = candidates[0]
    best_distance = reference_distance_km(best.country, coordinates)
    for record in candidates[1:]:
        distance = reference_distance_km(record.country, coordinates)
        # Strict comparison keeps the first encountered on ties
        if distance < best_distance:
            best, best_distance = record, distance

    return CandidateSelection(
        record=best,
        candidate_count=len(candidates),
        period_filter_applied=period_applied,
        geography_applied=True,
        distance_km=best_distance,
    )


def rank_categories(
    records: Sequence[ArchetypeRecord],
    coordinates: Optional[Coordinates] = None,
) -> List[str]:
    """
    Distinct categories; alphabetical, or by nearest member when coordinates are given.
    """
    categories = sorted({r.category for r in records})
    if coordinates is None:
        return categories

    nearest: Dict[str, float] = {category: math.inf for category in categories}
    for record in records:
        distance = reference_distance_km(record.country, coordinates)
        if distance < nearest[record.category]:
            nearest[record.category] = distance

    # Stable sort: equal distances (including inf) keep alphabetical order
    return sorted(categories, key=lambda category: nearest[category])


class GeoMatcher:
    """
    Selects the archetype closest to a user's building.

    Reads the listing through the catalog and fetches details only for the
    winning archetype.
    """

    def __init__(self, catalog: ArchetypeCatalog):
        self.catalog = catalog

    async def find_best(
        self,
        category: str,
        period: Optional[str] = None,
        coordinates: Optional[Coordinates] = None,
    ) -> Optional[ArchetypeMatchResult]:
        """
        Best archetype for the inputs, or None when there is none.

        Raises:
            RetrievalError: the forecasting service could not be reached
        """
        records = await self.catalog.list_all()
        selection = select_candidate(records, category, period, coordinates)
        if selection is None:
            logger.info("No archetypes in category", extra={"category": category})
            return None

        try:
            details = await self.catalog.get_details(selection.record)
        except NotFoundError:
            logger.warning(
                "Matched archetype missing upstream",
                extra={"archetype_id": selection.record.cache_key},
            )
            return None

        logger.debug(
            f"Matched {selection.record.name} among {selection.candidate_count} candidates "
            f"(period={selection.period_filter_applied}, geo={selection.geography_applied})",
            extra={"category": category},
        )
        return ArchetypeMatchResult(selection=selection, details=details)

    async def available_categories(
        self,
        coordinates: Optional[Coordinates] = None,
    ) -> List[str]:
        """Categories offered to the user, nearest first when a location is known."""
        records = await self.catalog.list_all()
        return rank_categories(records, coordinates)
