"""
Payload Transformer - Apply user modifications to an archetype payload.

Takes the archetype BUI and applies the user-facing overrides while keeping
every technical field the user never sees:
- Floor area (surfaces and exposed perimeter follow)
- Envelope U-values (walls, roof, windows)
- Heating / cooling setpoints (setbacks follow)

Inputs are never mutated: each step works on a structural copy, so the
archetype defaults cached by the catalog survive any number of
modification rounds.
"""

import copy
import logging
import math
from dataclasses import dataclass
from typing import Any, Dict, Optional

from ..baseline.catalog import ArchetypeDetails
from ..core.models import BuildingModifications
from ..core.payload import BuildingPayload, SurfaceRole

logger = logging.getLogger(__name__)


# Thermostat dead band expected by the forecasting simulator:
# setback = setpoint - 3 °C (heating), setpoint + 4 °C (cooling)
HEATING_SETBACK_OFFSET = -3.0
COOLING_SETBACK_OFFSET = 4.0


@dataclass
class ModifiedPayload:
    """Payload pair ready to submit to the forecasting simulator."""
    bui: BuildingPayload
    system: Dict[str, Any]

    def to_dict(self) -> Dict[str, Any]:
        return {"bui": self.bui.to_dict(), "system": copy.deepcopy(self.system)}


class PayloadTransformer:
    """
    Apply BuildingModifications to archetype payloads.

    Usage:
        transformer = PayloadTransformer()
        modified = transformer.apply_all(details, BuildingModifications(floor_area=60))
        submit(modified.to_dict())
    """

    def apply_floor_area(self, payload: BuildingPayload, new_area: float) -> BuildingPayload:
        """
        Resize the building to ``new_area`` m².

        Every surface scales with the floor area; the exposed perimeter
        scales with its square root (geometric similarity).
        """
        modified = payload.copy()
        original_area = payload.floor_area
        modified.floor_area = new_area

        if original_area <= 0:
            logger.warning(
                f"Archetype floor area is {original_area}, surfaces left unscaled"
            )
            return modified

        scale = new_area / original_area
        for surface in modified.surfaces:
            surface.area = surface.area * scale

        perimeter = modified.exposed_perimeter
        if perimeter is not None:
            modified.exposed_perimeter = perimeter * math.sqrt(scale)

        logger.debug(f"Floor area {original_area} -> {new_area} m² (scale {scale:.3f})")
        return modified

    def apply_thermal(
        self,
        payload: BuildingPayload,
        wall_u: Optional[float] = None,
        roof_u: Optional[float] = None,
        window_u: Optional[float] = None,
    ) -> BuildingPayload:
        """
        Replace envelope U-values by surface role.

        Surfaces whose role is floor or other keep their U-value.
        """
        new_values = {
            SurfaceRole.WALL: wall_u,
            SurfaceRole.ROOF: roof_u,
            SurfaceRole.WINDOW: window_u,
        }

        modified = payload.copy()
        changed = 0
        for surface in modified.surfaces:
            u_value = new_values.get(surface.role)
            if u_value is not None:
                surface.u_value = u_value
                changed += 1

        logger.debug(f"Updated U-value of {changed}/{len(modified.surfaces)} surfaces")
        return modified

    def apply_setpoints(
        self,
        payload: BuildingPayload,
        heating: Optional[float] = None,
        cooling: Optional[float] = None,
    ) -> BuildingPayload:
        """Set heating/cooling setpoints; the matching setback is reset with them."""
        modified = payload.copy()
        setpoints = modified.temperature_setpoints

        if heating is not None:
            setpoints["heating_setpoint"] = heating
            setpoints["heating_setback"] = heating + HEATING_SETBACK_OFFSET

        if cooling is not None:
            setpoints["cooling_setpoint"] = cooling
            setpoints["cooling_setback"] = cooling + COOLING_SETBACK_OFFSET

        return modified

    def apply_all(
        self,
        details: ArchetypeDetails,
        modifications: BuildingModifications,
    ) -> ModifiedPayload:
        """
        Apply floor area, then thermal, then setpoint modifications.

        The system payload is passed through unchanged.
        """
        bui = details.bui.copy()

        if modifications.floor_area is not None:
            bui = self.apply_floor_area(bui, modifications.floor_area)

        if modifications.has_thermal_changes:
            bui = self.apply_thermal(
                bui,
                wall_u=modifications.wall_u_value,
                roof_u=modifications.roof_u_value,
                window_u=modifications.window_u_value,
            )

        if modifications.has_setpoint_changes:
            bui = self.apply_setpoints(
                bui,
                heating=modifications.heating_setpoint,
                cooling=modifications.cooling_setpoint,
            )

        logger.info(
            "Applied building modifications",
            extra={"archetype_id": details.record.cache_key},
        )
        return ModifiedPayload(bui=bui, system=copy.deepcopy(details.system))
