"""
Scenario ranking by decision-maker persona.

Each persona is a weight vector over the five criteria. Scenarios are scored
with extract_criteria, ranked with TOPSIS, and returned best first.

Usage:
    ranker = ScenarioRanker()
    for result in ranker.rank(scenarios, financial_results, "cost-optimization"):
        print(result.rank, result.scenario_id, result.score)
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional, Sequence

from ..core.models import FinancialResult, RenovationScenario
from .criteria import CriteriaValues, extract_criteria
from .topsis import topsis

logger = logging.getLogger(__name__)

# Scenario id of the pre-renovation state
CURRENT_SCENARIO_ID = "current"


@dataclass(frozen=True)
class Persona:
    """Decision-maker profile."""
    id: str
    name: str
    description: str
    weights: CriteriaValues


MCDA_PERSONAS: Dict[str, Persona] = {
    p.id: p
    for p in [
        Persona(
            id="environmentally-conscious",
            name="Environmentally Conscious",
            description="Prioritizes sustainability and renewable energy integration",
            weights=CriteriaValues(
                sustainability=0.333,
                res_integration=0.267,
                energy_efficiency=0.2,
                user_comfort=0.133,
                financial=0.067,
            ),
        ),
        Persona(
            id="comfort-driven",
            name="Comfort-Driven",
            description="Prioritizes indoor comfort and energy efficiency",
            weights=CriteriaValues(
                user_comfort=0.333,
                energy_efficiency=0.267,
                financial=0.2,
                sustainability=0.133,
                res_integration=0.067,
            ),
        ),
        Persona(
            id="cost-optimization",
            name="Cost-Optimization Oriented",
            description="Prioritizes financial returns and cost savings",
            weights=CriteriaValues(
                financial=0.333,
                energy_efficiency=0.267,
                res_integration=0.2,
                user_comfort=0.133,
                sustainability=0.067,
            ),
        ),
    ]
}

DEFAULT_PERSONA = "environmentally-conscious"


def get_persona(persona_id: str) -> Persona:
    """Raises KeyError for unknown personas."""
    try:
        return MCDA_PERSONAS[persona_id]
    except KeyError:
        raise KeyError(f"Unknown persona: {persona_id}") from None


@dataclass
class RankingResult:
    """Ranked renovation scenario."""
    scenario_id: str
    rank: int
    score: float  # TOPSIS closeness, two decimals


class ScenarioRanker:
    """Ranks renovation scenarios for a persona."""

    def rank(
        self,
        scenarios: Sequence[RenovationScenario],
        financial_results: Optional[Mapping[str, FinancialResult]],
        persona_id: str,
    ) -> List[RankingResult]:
        """
        Rank the renovation scenarios (the current state is not ranked).

        Args:
            scenarios: Simulation outputs, optionally including "current"
            financial_results: Financial outputs keyed by scenario id
            persona_id: Key of MCDA_PERSONAS

        Returns:
            Results sorted by score, best first, ranks starting at 1
        """
        persona = get_persona(persona_id)
        financial_results = financial_results or {}

        renovations = [s for s in scenarios if s.id != CURRENT_SCENARIO_ID]
        if not renovations:
            return []

        current = next((s for s in scenarios if s.id == CURRENT_SCENARIO_ID), None)
        if current is not None and current.annual_energy_needs:
            baseline_energy = current.annual_energy_needs
        else:
            baseline_energy = renovations[0].annual_energy_needs

        criteria = [
            extract_criteria(s, financial_results.get(s.id), baseline_energy)
            for s in renovations
        ]
        scores = topsis(criteria, persona.weights)

        results = [
            RankingResult(scenario_id=s.id, rank=0, score=round(score, 2))
            for s, score in zip(renovations, scores)
        ]
        results.sort(key=lambda r: r.score, reverse=True)
        for position, result in enumerate(results, start=1):
            result.rank = position

        logger.info(f"Ranked {len(results)} scenarios for persona {persona.id}")
        return results
