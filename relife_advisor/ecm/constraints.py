"""
Modification constraints - check user overrides before they reach the simulator.

Every rule is evaluated; violations are collected as (field, message) pairs
so a form can show all of them at once. Nothing here raises.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from ..baseline.catalog import ArchetypeDetails
from ..core.models import BuildingModifications


# Bounds per field: (min, max, unit)
MODIFICATION_CONSTRAINTS: Dict[str, Tuple[float, float, str]] = {
    "floor_area": (10, 1000, "m²"),
    "number_of_floors": (1, 20, ""),
    "building_height": (2, 60, "m"),
    "u_values": (0.1, 5.0, "W/m²K"),
    "heating_setpoint": (15, 22, "°C"),
    "cooling_setpoint": (24, 30, "°C"),
    "number_of_occupants": (1, 20, ""),
    "window_distribution": (0, 100, "%"),
}

# Windows may cover at most this share of the opaque wall area
MAX_WINDOW_TO_WALL_RATIO = 0.4

FIELD_LABELS = {
    "floor_area": "Floor area",
    "number_of_floors": "Number of floors",
    "building_height": "Building height",
    "wall_u_value": "Wall U-value",
    "roof_u_value": "Roof U-value",
    "window_u_value": "Window U-value",
    "heating_setpoint": "Heating setpoint",
    "cooling_setpoint": "Cooling setpoint",
    "number_of_occupants": "Number of occupants",
}


@dataclass(frozen=True)
class ModificationError:
    """One violated constraint."""
    field: str  # BuildingModifications field name
    message: str


@dataclass
class ModificationValidation:
    """Result of validate_modifications."""
    errors: List[ModificationError] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def errors_for(self, field_name: str) -> List[str]:
        return [e.message for e in self.errors if e.field == field_name]


def _format_bound(value: float) -> str:
    return f"{value:g}"


def _check_range(
    errors: List[ModificationError],
    field_name: str,
    value: Optional[float],
    constraint: str,
) -> None:
    if value is None:
        return
    low, high, unit = MODIFICATION_CONSTRAINTS[constraint]
    if value < low or value > high:
        suffix = f" {unit}" if unit else ""
        errors.append(ModificationError(
            field=field_name,
            message=(
                f"{FIELD_LABELS[field_name]} must be between "
                f"{_format_bound(low)}-{_format_bound(high)}{suffix}"
            ),
        ))


def validate_modifications(
    modifications: BuildingModifications,
    details: ArchetypeDetails,
) -> ModificationValidation:
    """
    Check modifications against the physical bounds and the archetype.

    Args:
        modifications: User overrides
        details: Archetype they apply to (wall area, default setpoints)

    Returns:
        ModificationValidation with every violation
    """
    errors: List[ModificationError] = []

    _check_range(errors, "floor_area", modifications.floor_area, "floor_area")
    _check_range(errors, "number_of_floors", modifications.number_of_floors, "number_of_floors")
    _check_range(errors, "building_height", modifications.building_height, "building_height")

    if modifications.total_window_area is not None:
        max_window_area = details.bui.total_wall_area * MAX_WINDOW_TO_WALL_RATIO
        if modifications.total_window_area > max_window_area:
            errors.append(ModificationError(
                field="total_window_area",
                message=(
                    f"Window area cannot exceed {MAX_WINDOW_TO_WALL_RATIO:.0%} "
                    f"of wall area ({max_window_area:.1f} m²)"
                ),
            ))

    if modifications.window_distribution is not None:
        low, high, _ = MODIFICATION_CONSTRAINTS["window_distribution"]
        shares = modifications.window_distribution.model_dump()
        out_of_range = [side for side, share in shares.items() if share < low or share > high]
        if out_of_range:
            errors.append(ModificationError(
                field="window_distribution",
                message=(
                    f"Window share must be between {low}-{high}% "
                    f"({', '.join(out_of_range)})"
                ),
            ))

    _check_range(errors, "wall_u_value", modifications.wall_u_value, "u_values")
    _check_range(errors, "roof_u_value", modifications.roof_u_value, "u_values")
    _check_range(errors, "window_u_value", modifications.window_u_value, "u_values")

    _check_range(errors, "heating_setpoint", modifications.heating_setpoint, "heating_setpoint")
    _check_range(errors, "cooling_setpoint", modifications.cooling_setpoint, "cooling_setpoint")

    if modifications.cooling_setpoint is not None:
        heating = (
            modifications.heating_setpoint
            if modifications.heating_setpoint is not None
            else details.setpoints.heating_setpoint
        )
        if modifications.cooling_setpoint <= heating:
            errors.append(ModificationError(
                field="cooling_setpoint",
                message="Cooling setpoint must be higher than heating setpoint",
            ))

    _check_range(errors, "number_of_occupants", modifications.number_of_occupants, "number_of_occupants")

    return ModificationValidation(errors=errors)
