import math

import pytest

from pallet_load import (
    BoxDimensions,
    ContainerProfile,
    PalletDimensions,
    build_input,
    calculate_load_plan,
    estimate_loose_boxes,
    solve_container_floor,
    solve_pallet,
)
from pallet_load.calculator import serialise_plan


def build_example_plan():
    box = BoxDimensions(40, 30, 20)
    pallet = PalletDimensions(120, 100, 15)
    return calculate_load_plan(box, pallet)


def test_single_pallet_layer_and_stacks():
    plan = solve_pallet(BoxDimensions(40, 30, 20), PalletDimensions(120, 100, 15))
    assert plan.layer_capacity == 9
    assert plan.layer.rotated is False
    assert plan.stack_depth("standard") == 10
    assert plan.stack_depth("high_cube") == 12
    assert math.isclose(plan.stack_height_cm("standard"), 215)
    assert math.isclose(plan.stack_height_cm("high_cube"), 255)
    assert plan.boxes_per_pallet("standard") == 90
    assert plan.boxes_per_pallet("high_cube") == 108


def test_container_floor_fit():
    floor = solve_container_floor(PalletDimensions(120, 100), 1203, 235)
    assert (floor.cols, floor.rows, floor.count) == (10, 2, 20)
    assert floor.orientation == "standard"

    short = solve_container_floor(PalletDimensions(120, 100), 589, 235)
    assert (short.cols, short.rows, short.count) == (4, 2, 8)


def test_calculates_expected_container_totals():
    plan = build_example_plan()
    gp20, gp40, hq40 = plan.containers
    assert [fit.profile.name for fit in plan.containers] == ["20GP", "40GP", "40HQ"]

    assert gp20.pallets_on_floor == 8
    assert gp20.total_boxes == 8 * 90
    assert gp40.pallets_on_floor == 20
    assert gp40.total_boxes == 20 * 90
    assert hq40.pallets_on_floor == 20
    assert hq40.boxes_per_pallet == 108
    assert hq40.total_boxes == 20 * 9 * 12
    assert hq40.total_pallets == 20
    assert (hq40.cols, hq40.rows, hq40.orientation) == (10, 2, "standard")
    assert plan.container("40HQ") is hq40


def test_unknown_container_name_raises_key_error():
    with pytest.raises(KeyError):
        build_example_plan().container("45HC")


def test_rotated_pallet_on_floor():
    # standard 12 × 1 = 12, rotated 10 × 2 = 20
    plan = calculate_load_plan(BoxDimensions(40, 30, 20), PalletDimensions(100, 120))
    fit = plan.container("40GP")
    assert fit.orientation == "rotated"
    assert (fit.cols, fit.rows, fit.pallets_on_floor) == (10, 2, 20)


def test_recalculation_is_idempotent():
    assert build_example_plan() == build_example_plan()


def test_incomplete_box_gives_empty_plan():
    plan = calculate_load_plan(BoxDimensions(0, 30, 20), PalletDimensions(120, 100))
    assert plan.pallet_plan.layer_capacity == 0
    for fit in plan.containers:
        assert fit.total_boxes == 0
        # Pallets still fit on the floor even without boxes.
        assert fit.pallets_on_floor > 0


def test_missing_box_height_gives_zero_layers():
    plan = calculate_load_plan(BoxDimensions(40, 30, math.nan), PalletDimensions(120, 100))
    assert plan.pallet_plan.layer_capacity == 9
    assert plan.pallet_plan.stack_depth("standard") == 0
    assert all(fit.total_boxes == 0 for fit in plan.containers)


def test_tall_pallet_base_gives_zero_layers():
    plan = calculate_load_plan(BoxDimensions(40, 30, 20), PalletDimensions(120, 100, 230))
    assert plan.pallet_plan.stack_depth("standard") == 0
    assert plan.pallet_plan.stack_height_cm("standard") == 230
    assert plan.pallet_plan.stack_depth("high_cube") == 1
    assert plan.container("40GP").total_boxes == 0
    assert plan.container("40HQ").total_boxes == 20 * 9


def test_custom_profiles():
    profiles = [ContainerProfile("tiny", 250, 110, 130, "low")]
    plan = calculate_load_plan(BoxDimensions(40, 30, 20), PalletDimensions(120, 100, 15), profiles)
    (fit,) = plan.containers
    assert fit.pallets_on_floor == 2
    assert plan.pallet_plan.stack_depth("low") == 5
    assert fit.total_boxes == 2 * 9 * 5


def test_conflicting_height_class_limits_are_rejected():
    profiles = [
        ContainerProfile("a", 589, 235, 228, "standard"),
        ContainerProfile("b", 1203, 235, 240, "standard"),
    ]
    with pytest.raises(ValueError, match="conflicting"):
        calculate_load_plan(BoxDimensions(40, 30, 20), PalletDimensions(120, 100), profiles)


def test_loose_estimate_by_volume():
    estimate = estimate_loose_boxes(BoxDimensions(50, 40, 30))
    assert math.isclose(estimate.box_cbm, 0.06)
    assert dict(estimate.boxes_by_container) == {"20GP": 466, "40GP": 966, "40HQ": 1133}


def test_loose_estimate_with_incomplete_box():
    estimate = estimate_loose_boxes(BoxDimensions(50, 0, 30))
    assert estimate.box_cbm == 0.0
    assert dict(estimate.boxes_by_container) == {"20GP": 0, "40GP": 0, "40HQ": 0}


def test_build_input_converts_units_and_presets():
    data = build_input(
        {
            "box": {"length": 400, "width": "300", "height": 200, "unit": "mm"},
            "pallet": "euro",
        }
    )
    assert math.isclose(data.box.length_cm, 40)
    assert math.isclose(data.box.width_cm, 30)
    assert math.isclose(data.box.height_cm, 20)
    assert data.pallet == PalletDimensions(120, 80, 15)
    assert data.pallet_preset == "euro"


def test_build_input_custom_pallet_defaults_base_height():
    data = build_input(
        {
            "box": {"length": 10, "width": 10, "height": 10, "unit": "in"},
            "pallet": {"preset": "custom", "length": 110, "width": 110},
        }
    )
    assert math.isclose(data.box.length_cm, 25.4)
    assert data.pallet == PalletDimensions(110, 110, 15)


def test_build_input_defaults_to_standard_pallet():
    data = build_input({"box": {"length": 40, "width": 30, "height": 20}})
    assert data.pallet == PalletDimensions(120, 100, 15)
    assert data.pallet_preset == "std"


def test_build_input_blank_fields_are_incomplete_not_invalid():
    data = build_input({"box": {"length": "", "width": None}})
    plan = calculate_load_plan(data.box, data.pallet)
    assert data.box == BoxDimensions(0.0, 0.0, 0.0)
    assert all(fit.total_boxes == 0 for fit in plan.containers)


@pytest.mark.parametrize(
    "raw, message",
    [
        ({"box": {"length": "abc"}}, "box length"),
        ({"box": {"length": 1, "unit": "yard"}}, "Unsupported unit"),
        ({"box": {}, "pallet": "pallet-x"}, "Unsupported pallet preset"),
        ({"box": [40, 30, 20]}, "Invalid box"),
        ({"box": {}, "pallet": 12}, "Invalid pallet"),
        ([1, 2, 3], "JSON object"),
        ({"box": {"length": 10**400}}, "box length"),
    ],
)
def test_build_input_rejects_malformed_data(raw, message):
    with pytest.raises(ValueError, match=message):
        build_input(raw)


def test_serialise_plan():
    plan = build_example_plan()
    data = serialise_plan(plan, estimate_loose_boxes(plan.box))
    assert data["pallet"]["layer_capacity"] == 9
    assert data["pallet"]["stacks"]["high_cube"]["boxes_per_pallet"] == 108
    assert [row["total_boxes"] for row in data["containers"]] == [720, 1800, 2160]
    assert data["containers"][2]["type"] == "40HQ"
    assert data["loose"]["boxes_by_container"]["40HQ"] == math.floor(68 / 0.024)


def test_loose_estimate_with_vanishing_box_volume():
    estimate = estimate_loose_boxes(BoxDimensions(40, 30, 1e-320))
    assert estimate.box_cbm > 0
    assert estimate.boxes_for("40HQ") == 0


def test_plans_are_immutable_and_hashable():
    plan = build_example_plan()
    assert isinstance(plan.pallet_plan.stacks, tuple)
    assert hash(plan) == hash(build_example_plan())
    assert len({plan, build_example_plan()}) == 1
    assert hash(estimate_loose_boxes(plan.box)) == hash(estimate_loose_boxes(plan.box))


def test_unknown_height_class_raises_key_error():
    with pytest.raises(KeyError):
        build_example_plan().pallet_plan.stack_depth("reefer")
