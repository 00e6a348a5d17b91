"""
TOPSIS ranking over criteria vectors.

All criteria are benefit criteria (already normalized to [0, 1] by
extract_criteria), so the matrix is weighted directly without a further
column normalization.
"""

from dataclasses import dataclass
from typing import List, Sequence

import numpy as np

from .criteria import CriteriaValues


@dataclass(frozen=True)
class RankedAlternative:
    """Position in the input sequence plus closeness coefficient (higher is better)."""
    index: int
    closeness: float


def topsis(alternatives: Sequence[CriteriaValues], weights: CriteriaValues) -> List[float]:
    """
    Closeness coefficient of each alternative, in input order.

    Returns [] for no alternatives and [1.0] for a single one. An
    alternative at zero distance from both ideal points scores 0.5.
    """
    if not alternatives:
        return []
    if len(alternatives) == 1:
        return [1.0]

    matrix = np.array([a.as_vector() for a in alternatives], dtype=float)
    weighted = matrix * np.array(weights.as_vector(), dtype=float)

    ideal_best = weighted.max(axis=0)
    ideal_worst = weighted.min(axis=0)

    d_best = np.sqrt(((weighted - ideal_best) ** 2).sum(axis=1))
    d_worst = np.sqrt(((weighted - ideal_worst) ** 2).sum(axis=1))

    denom = d_best + d_worst
    closeness = np.full(len(alternatives), 0.5)
    nonzero = denom > 0
    closeness[nonzero] = d_worst[nonzero] / denom[nonzero]

    return [float(c) for c in closeness]


def rank_alternatives(
    alternatives: Sequence[CriteriaValues],
    weights: CriteriaValues,
) -> List[RankedAlternative]:
    """TOPSIS results sorted best first; equal scores keep input order."""
    scores = topsis(alternatives, weights)
    ranked = [RankedAlternative(index=i, closeness=score) for i, score in enumerate(scores)]
    return sorted(ranked, key=lambda r: r.closeness, reverse=True)
