"""
Decision criteria - turn simulation and financial outputs into MCDA inputs.

Five dimensionless scores in [0, 1], higher is better:
    energy_efficiency   savings relative to the baseline energy demand
    res_integration     position of the EPC class on the G..A+ scale
    sustainability      mean of the two above
    user_comfort        comfort index / 100
    financial           mean of the ROI and NPV sub-scores, 0 without a result
"""

import math
from dataclasses import astuple, dataclass
from typing import List, Optional, Tuple

from ..core.epc import normalized_epc_score
from ..core.models import FinancialResult, RenovationScenario

# ROI of 2.0 (a 200% return) saturates the ROI sub-score
MAX_ROI_NORMALIZATION = 2.0

# tanh scale for NPV: 0 EUR -> 0.5, +-50k EUR -> ~0.88 / ~0.12
NPV_NORMALIZATION_FACTOR = 50_000.0

# Column order of the decision matrix
CRITERIA: Tuple[str, ...] = (
    "energy_efficiency",
    "res_integration",
    "sustainability",
    "user_comfort",
    "financial",
)


@dataclass(frozen=True)
class CriteriaValues:
    """Criteria scores of one alternative, or a weight vector in the same order."""
    energy_efficiency: float = 0.0
    res_integration: float = 0.0
    sustainability: float = 0.0
    user_comfort: float = 0.0
    financial: float = 0.0

    def as_vector(self) -> List[float]:
        return list(astuple(self))


def clamp01(value: float) -> float:
    return max(0.0, min(1.0, value))


def energy_efficiency_score(annual_energy_needs: float, baseline_energy: float) -> float:
    if baseline_energy <= 0:
        return 0.0
    return clamp01(1 - annual_energy_needs / baseline_energy)


def roi_score(return_on_investment: float) -> float:
    return clamp01(return_on_investment / MAX_ROI_NORMALIZATION)


def npv_score(net_present_value: float) -> float:
    return clamp01(0.5 + 0.5 * math.tanh(net_present_value / NPV_NORMALIZATION_FACTOR))


def financial_score(financial: Optional[FinancialResult]) -> float:
    if financial is None:
        return 0.0
    return (roi_score(financial.return_on_investment) + npv_score(financial.net_present_value)) / 2


def extract_criteria(
    scenario: RenovationScenario,
    financial: Optional[FinancialResult],
    baseline_energy: float,
) -> CriteriaValues:
    """
    Score one renovation scenario.

    Args:
        scenario: Simulation outputs for the scenario
        financial: Financial-risk outputs, None when not assessed
        baseline_energy: Annual energy needs of the building before renovation

    Returns:
        CriteriaValues with every field in [0, 1]
    """
    energy_efficiency = energy_efficiency_score(scenario.annual_energy_needs, baseline_energy)
    res_integration = normalized_epc_score(scenario.epc_class)

    return CriteriaValues(
        energy_efficiency=energy_efficiency,
        res_integration=res_integration,
        sustainability=(energy_efficiency + res_integration) / 2,
        user_comfort=clamp01(scenario.comfort_index / 100),
        financial=financial_score(financial),
    )
