"""
Tests for applying building modifications to archetype payloads.

Run with: pytest tests/test_transformer.py -v
"""

import math

import pytest

from relife_advisor.core.models import BuildingModifications
from relife_advisor.core.payload import BuildingPayload, SurfaceRole
from relife_advisor.ecm.transformer import (
    COOLING_SETBACK_OFFSET,
    HEATING_SETBACK_OFFSET,
    PayloadTransformer,
)


@pytest.fixture
def transformer() -> PayloadTransformer:
    return PayloadTransformer()


def _areas(payload):
    return [s.area for s in payload.surfaces]


class TestFloorArea:
    """Tests for floor area scaling."""

    def test_halving_floor_area(self, transformer, bui_payload):
        """120 m² archetype resized to 60 m²."""
        modified = transformer.apply_floor_area(bui_payload, 60.0)

        assert modified.floor_area == 60.0
        for before, after in zip(_areas(bui_payload), _areas(modified)):
            assert after == pytest.approx(before * 0.5)
        assert modified.exposed_perimeter == pytest.approx(44.0 * math.sqrt(0.5))
        assert modified.exposed_perimeter == pytest.approx(44.0 * 0.7071, rel=1e-4)

    def test_doubling_floor_area(self, transformer, bui_payload):
        modified = transformer.apply_floor_area(bui_payload, 240.0)
        assert modified.total_window_area == pytest.approx(32.0)
        assert modified.exposed_perimeter == pytest.approx(44.0 * math.sqrt(2))

    def test_input_not_mutated(self, transformer, bui_payload):
        before = bui_payload.to_dict()
        transformer.apply_floor_area(bui_payload, 60.0)
        assert bui_payload.to_dict() == before

    def test_zero_original_area_skips_scaling(self, transformer, bui_payload):
        bui_payload.floor_area = 0
        modified = transformer.apply_floor_area(bui_payload, 80.0)

        assert modified.floor_area == 80.0
        assert _areas(modified) == _areas(bui_payload)

    def test_missing_perimeter(self, transformer, bui_payload):
        del bui_payload.building["exposed_perimeter"]
        modified = transformer.apply_floor_area(bui_payload, 60.0)
        assert modified.exposed_perimeter is None
        assert modified.floor_area == 60.0

    def test_other_fields_preserved(self, transformer, bui_payload):
        modified = transformer.apply_floor_area(bui_payload, 60.0)
        assert modified.building["construction_class"] == "class_i"
        assert modified.parameters == bui_payload.parameters
        assert modified.surfaces[-1].attributes == bui_payload.surfaces[-1].attributes


class TestThermal:
    """Tests for U-value replacement by surface role."""

    def test_by_role(self, transformer, bui_payload):
        modified = transformer.apply_thermal(bui_payload, wall_u=0.3, roof_u=0.25, window_u=1.4)

        for surface in modified.surfaces:
            if surface.role == SurfaceRole.WALL:
                assert surface.u_value == 0.3
            elif surface.role == SurfaceRole.ROOF:
                assert surface.u_value == 0.25
            elif surface.role == SurfaceRole.WINDOW:
                assert surface.u_value == 1.4

    def test_floor_untouched(self, transformer, bui_payload):
        modified = transformer.apply_thermal(bui_payload, wall_u=0.3, roof_u=0.25, window_u=1.4)
        slab = modified.surfaces_with_role(SurfaceRole.FLOOR)[0]
        assert slab.u_value == 1.6

    def test_wall_named_surface_gets_wall_u(self, transformer, bui_dict):
        bui_dict["building_surface"].append({
            "name": "Ground floor wall", "type": "opaque", "area": 20.0, "u_value": 1.5,
        })
        modified = transformer.apply_thermal(BuildingPayload.from_dict(bui_dict), wall_u=0.3)

        ground_wall = modified.surfaces[-1]
        assert ground_wall.name == "Ground floor wall"
        assert ground_wall.u_value == 0.3
        # The slab keeps its U-value
        assert modified.surfaces_with_role(SurfaceRole.FLOOR)[0].u_value == 1.6

    def test_partial(self, transformer, bui_payload):
        modified = transformer.apply_thermal(bui_payload, roof_u=0.2)

        assert modified.surfaces_with_role(SurfaceRole.ROOF)[0].u_value == 0.2
        assert [s.u_value for s in modified.surfaces_with_role(SurfaceRole.WALL)] == [1.4, 1.4, 1.2, 1.2]
        assert all(s.u_value == 5.0 for s in modified.surfaces_with_role(SurfaceRole.WINDOW))

    def test_input_not_mutated(self, transformer, bui_payload):
        transformer.apply_thermal(bui_payload, wall_u=0.3)
        assert bui_payload.surfaces_with_role(SurfaceRole.WALL)[0].u_value == 1.4


class TestSetpoints:
    """Tests for setpoint and setback handling."""

    def test_heating_setback(self, transformer, bui_payload):
        modified = transformer.apply_setpoints(bui_payload, heating=18.0)
        setpoints = modified.temperature_setpoints

        assert setpoints["heating_setpoint"] == 18.0
        assert setpoints["heating_setback"] == 15.0
        # Cooling left alone
        assert setpoints["cooling_setpoint"] == 26.0
        assert setpoints["cooling_setback"] == 30.0

    def test_cooling_setback(self, transformer, bui_payload):
        modified = transformer.apply_setpoints(bui_payload, cooling=26.0)
        assert modified.temperature_setpoints["cooling_setback"] == 30.0

    def test_offsets(self):
        assert HEATING_SETBACK_OFFSET == -3.0
        assert COOLING_SETBACK_OFFSET == 4.0

    def test_units_preserved(self, transformer, bui_payload):
        modified = transformer.apply_setpoints(bui_payload, heating=21.0, cooling=25.0)
        assert modified.temperature_setpoints["units"] == "°C"
        assert bui_payload.temperature_setpoints["heating_setpoint"] == 20.0


class TestApplyAll:
    """Tests for the full modification pipeline."""

    def test_no_modifications(self, transformer, greek_details, bui_dict, system_dict):
        modified = transformer.apply_all(greek_details, BuildingModifications())
        assert modified.to_dict() == {"bui": bui_dict, "system": system_dict}

    def test_all_steps(self, transformer, greek_details):
        modifications = BuildingModifications(
            floor_area=60.0,
            wall_u_value=0.3,
            roof_u_value=0.25,
            window_u_value=1.4,
            heating_setpoint=18.0,
            cooling_setpoint=27.0,
        )
        modified = transformer.apply_all(greek_details, modifications)
        bui = modified.bui

        assert bui.floor_area == 60.0
        assert bui.total_window_area == pytest.approx(8.0)
        roof = bui.surfaces_with_role(SurfaceRole.ROOF)[0]
        assert roof.area == pytest.approx(65.0)
        assert roof.u_value == 0.25
        assert bui.temperature_setpoints["heating_setback"] == 15.0
        assert bui.temperature_setpoints["cooling_setback"] == 31.0

    def test_cached_details_untouched(self, transformer, greek_details):
        transformer.apply_all(
            greek_details,
            BuildingModifications(floor_area=60.0, wall_u_value=0.3, heating_setpoint=18.0),
        )

        assert greek_details.bui.floor_area == 120.0
        assert greek_details.bui.surfaces_with_role(SurfaceRole.WALL)[0].u_value == 1.4
        assert greek_details.bui.temperature_setpoints["heating_setpoint"] == 20.0

    def test_system_passed_through(self, transformer, greek_details, system_dict):
        modified = transformer.apply_all(greek_details, BuildingModifications(floor_area=60.0))

        assert modified.system == system_dict
        modified.system["generator"]["efficiency"] = 0.5
        assert greek_details.system["generator"]["efficiency"] == 0.92

    def test_payload_shape(self, transformer, greek_details):
        data = transformer.apply_all(greek_details, BuildingModifications(floor_area=60.0)).to_dict()

        assert set(data) == {"bui", "system"}
        assert set(data["bui"]) == {"building", "building_surface", "building_parameters", "units"}
        assert data["bui"]["building"]["net_floor_area"] == 60.0
