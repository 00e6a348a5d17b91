"""
Technical building payload (the "BUI" sent to the forecasting simulator).

The upstream payload is deeply nested and carries many fields this package
never touches. Ingestion keeps those verbatim so that ``to_dict()`` returns
the upstream shape with only the modified values changed.

Surface roles are assigned once, here, from the free-text surface names.
Thermal modification works on ``SurfaceRole``. The wall area used by the
window limit has its own name rule: every opaque surface except those
named roof, slab or ground.
"""

import copy
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Tuple

logger = logging.getLogger(__name__)


class SurfaceType(str, Enum):
    OPAQUE = "opaque"
    TRANSPARENT = "transparent"


class SurfaceRole(str, Enum):
    """What a surface is in the envelope."""
    WALL = "wall"
    ROOF = "roof"
    WINDOW = "window"
    FLOOR = "floor"
    OTHER = "other"


CARDINAL_DIRECTIONS = ("north", "south", "east", "west")
FLOOR_KEYWORDS = ("slab", "ground", "floor")
WALL_AREA_EXCLUSIONS = ("roof", "slab", "ground")


def classify_surface(name: str, surface_type: SurfaceType) -> SurfaceRole:
    """
    Best-effort role for an upstream surface.

    The forecasting service does not tag surfaces, so the role is read off
    the name: "Roof surface", "Opaque north surface", "Slab to ground",
    "Transparent east surface". Names outside this vocabulary end up as
    OTHER and are left alone by thermal modifications.
    """
    if surface_type == SurfaceType.TRANSPARENT:
        return SurfaceRole.WINDOW

    lowered = name.lower()
    if "roof" in lowered:
        return SurfaceRole.ROOF
    # "Ground floor wall" is a wall
    if "wall" in lowered or any(direction in lowered for direction in CARDINAL_DIRECTIONS):
        return SurfaceRole.WALL
    if any(keyword in lowered for keyword in FLOOR_KEYWORDS):
        return SurfaceRole.FLOOR
    return SurfaceRole.OTHER


@dataclass
class BuildingSurface:
    """One envelope element (wall, roof, window, floor)."""
    name: str
    type: SurfaceType
    area: float  # m²
    u_value: float  # W/m²K
    role: SurfaceRole
    attributes: Dict[str, Any] = field(default_factory=dict)  # orientation, g_value, ...

    @property
    def is_opaque(self) -> bool:
        return self.type == SurfaceType.OPAQUE

    @property
    def is_transparent(self) -> bool:
        return self.type == SurfaceType.TRANSPARENT

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "BuildingSurface":
        name = str(data["name"])
        surface_type = SurfaceType(data["type"])
        area = float(data["area"])
        u_value = float(data["u_value"])
        if area < 0 or u_value < 0:
            raise ValueError(
                f"Surface '{name}' has negative area ({area}) or U-value ({u_value})"
            )

        attributes = {
            key: value for key, value in data.items()
            if key not in ("name", "type", "area", "u_value")
        }
        return cls(
            name=name,
            type=surface_type,
            area=area,
            u_value=u_value,
            role=classify_surface(name, surface_type),
            attributes=copy.deepcopy(attributes),
        )

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "name": self.name,
            "type": self.type.value,
            "area": self.area,
            "u_value": self.u_value,
        }
        data.update(copy.deepcopy(self.attributes))
        return data


@dataclass
class BuildingPayload:
    """
    Building description as consumed by the forecasting simulator.

    ``building`` holds the building-level record (net_floor_area, n_floors,
    height, exposed_perimeter, latitude, longitude, construction_class, ...),
    ``parameters`` the building_parameters block (temperature_setpoints,
    system_capacities, airflow_rates, internal_gains, ...), ``extra`` any
    other top-level keys (units, adjacent_zones, ...).
    """
    building: Dict[str, Any]
    surfaces: List[BuildingSurface]
    parameters: Dict[str, Any]
    extra: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "BuildingPayload":
        """
        Ingest an upstream payload.

        Raises:
            KeyError, TypeError, ValueError: if the payload is malformed
        """
        building = data["building"]
        parameters = data["building_parameters"]
        if not isinstance(building, Mapping) or not isinstance(parameters, Mapping):
            raise TypeError("'building' and 'building_parameters' must be objects")

        surfaces = [BuildingSurface.from_dict(s) for s in data["building_surface"]]
        extra = {
            key: value for key, value in data.items()
            if key not in ("building", "building_surface", "building_parameters")
        }

        unclassified = [s.name for s in surfaces if s.role == SurfaceRole.OTHER]
        if unclassified:
            logger.debug(f"Surfaces without a recognised role: {unclassified}")

        return cls(
            building=copy.deepcopy(dict(building)),
            surfaces=surfaces,
            parameters=copy.deepcopy(dict(parameters)),
            extra=copy.deepcopy(extra),
        )

    def to_dict(self) -> Dict[str, Any]:
        data = copy.deepcopy(self.extra)
        data["building"] = copy.deepcopy(self.building)
        data["building_surface"] = [s.to_dict() for s in self.surfaces]
        data["building_parameters"] = copy.deepcopy(self.parameters)
        return data

    def copy(self) -> "BuildingPayload":
        """Independent structural copy; mutating it never touches self."""
        return copy.deepcopy(self)

    # ------------------------------------------------------------------
    # Building-level accessors
    # ------------------------------------------------------------------

    @property
    def floor_area(self) -> float:
        return float(self.building["net_floor_area"])

    @floor_area.setter
    def floor_area(self, value: float) -> None:
        self.building["net_floor_area"] = value

    @property
    def number_of_floors(self) -> int:
        return int(self.building["n_floors"])

    @property
    def height(self) -> float:
        return float(self.building["height"])

    @property
    def exposed_perimeter(self) -> Optional[float]:
        value = self.building.get("exposed_perimeter")
        return float(value) if value is not None else None

    @exposed_perimeter.setter
    def exposed_perimeter(self, value: float) -> None:
        self.building["exposed_perimeter"] = value

    @property
    def location(self) -> Tuple[float, float]:
        """(latitude, longitude) as stored upstream."""
        return float(self.building["latitude"]), float(self.building["longitude"])

    @property
    def temperature_setpoints(self) -> Dict[str, Any]:
        return self.parameters.setdefault("temperature_setpoints", {})

    # ------------------------------------------------------------------
    # Surface helpers
    # ------------------------------------------------------------------

    def surfaces_with_role(self, role: SurfaceRole) -> List[BuildingSurface]:
        return [s for s in self.surfaces if s.role == role]

    @property
    def total_window_area(self) -> float:
        return sum(s.area for s in self.surfaces if s.is_transparent)

    @property
    def total_wall_area(self) -> float:
        """Opaque area excluding surfaces named roof, slab or ground."""
        return sum(
            s.area for s in self.surfaces
            if s.is_opaque
            and not any(keyword in s.name.lower() for keyword in WALL_AREA_EXCLUSIONS)
        )
