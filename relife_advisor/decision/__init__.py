"""
Decision Module - multi-criteria ranking of renovation scenarios.

- criteria: simulation/financial outputs -> five [0, 1] scores
- topsis: closeness coefficients over criteria vectors
- ranker: persona weights and scenario ranking
"""

from .criteria import (
    CRITERIA,
    MAX_ROI_NORMALIZATION,
    NPV_NORMALIZATION_FACTOR,
    CriteriaValues,
    extract_criteria,
)
from .ranker import MCDA_PERSONAS, Persona, RankingResult, ScenarioRanker, get_persona
from .topsis import RankedAlternative, rank_alternatives, topsis

__all__ = [
    'CRITERIA', 'MAX_ROI_NORMALIZATION', 'NPV_NORMALIZATION_FACTOR', 'CriteriaValues', 'extract_criteria',
    'MCDA_PERSONAS', 'Persona', 'RankingResult', 'ScenarioRanker', 'get_persona',
    'RankedAlternative', 'rank_alternatives', 'topsis',
]
