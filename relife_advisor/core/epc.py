"""
Energy Performance Certificate (EPC) class scale.
"""

from typing import List, Optional

# Worst to best
EPC_ORDER: List[str] = ["G", "F", "E", "D", "C", "B", "A", "A+"]

EPC_DESCRIPTIONS = {
    "A+": "Excellent - Nearly zero energy building",
    "A": "Very Good - High efficiency",
    "B": "Good - Above average efficiency",
    "C": "Average - Typical modern building",
    "D": "Below Average - Room for improvement",
    "E": "Poor - Significant improvements needed",
    "F": "Very Poor - Major renovations recommended",
    "G": "Lowest - Urgent action required",
}


def epc_index(epc_class: str) -> int:
    """Position on the scale (G=0 ... A+=7), -1 if unknown."""
    try:
        return EPC_ORDER.index(epc_class)
    except ValueError:
        return -1


def epc_improvement(from_class: str, to_class: str) -> Optional[int]:
    """Class steps gained going from ``from_class`` to ``to_class``; None if either is unknown."""
    start, end = epc_index(from_class), epc_index(to_class)
    if start < 0 or end < 0:
        return None
    return end - start


def epc_description(epc_class: str) -> str:
    return EPC_DESCRIPTIONS.get(epc_class, "Unknown class")


def normalized_epc_score(epc_class: str) -> float:
    """Scale position mapped to [0, 1]; 0 for unknown classes."""
    index = epc_index(epc_class)
    if index < 0:
        return 0.0
    return index / (len(EPC_ORDER) - 1)
