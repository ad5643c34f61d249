from pathlib import Path

import pytest
from PIL import Image

from roicoder.apps.roi_color_coder.core.config import (
    ColorCoderSettings,
    build_runtime_config,
)
from roicoder.apps.roi_color_coder.core.engine import ColorCodingEngine
from roicoder.apps.roi_color_coder.core.errors import InvalidRangeError
from roicoder.apps.roi_color_coder.core.models import Region
from roicoder.libs.lut import InvalidLUTError, get_lut


def _regions() -> list[Region]:
    return [
        Region.from_points(
            f"R{index}",
            [(x, 0), (x + 10, 0), (x + 10, 10), (x, 10)],
        )
        for index, x in enumerate(range(0, 60, 12), start=1)
    ]


def _config(**overrides):
    return build_runtime_config(settings=ColorCoderSettings(), **overrides)


def test_end_to_end_colors_regions_and_legend(blue_white_red):
    regions = _regions()
    measurements = {"R1": 10, "R2": 20, "R3": 30, "R4": 40, "R5": 50}
    canvas = Image.new("RGB", (64, 12), (0, 0, 0))

    engine = ColorCodingEngine(_config(tick_count=3), lut=blue_white_red)
    result = engine.run(regions, measurements, canvas)

    assert (result.value_range.minimum, result.value_range.maximum) == (10.0, 50.0)
    assert result.assignment.normalized["R1"] == 0.0
    assert result.assignment.normalized["R3"] == 0.5
    assert result.assignment.normalized["R5"] == 1.0
    assert result.assignment["R1"] == (0, 0, 255)
    assert result.assignment["R3"] == (255, 255, 255)
    assert result.assignment["R5"] == (255, 0, 0)

    assert [tick.position for tick in result.legend.ticks] == [0.0, 0.5, 1.0]
    assert result.legend.labels == ["10", "30", "50"]

    assert result.painted is True
    assert canvas.getpixel((5, 5)) == (0, 0, 255)
    assert canvas.getpixel((53, 5)) == (255, 0, 0)
    assert result.notes == []


def test_run_without_canvas_only_resolves_colors(blue_white_red):
    engine = ColorCodingEngine(_config(), lut=blue_white_red)
    result = engine.run(_regions(), {"R1": 1.0, "R2": 2.0})

    assert result.painted is False
    assert set(result.assignment.colors) == {"R1", "R2"}
    assert result.assignment.skipped == ("R3", "R4", "R5")
    assert any("skipped" in note for note in result.notes)


def test_missing_measurements_never_raise(blue_white_red):
    engine = ColorCodingEngine(
        _config(no_data_policy="fixed_color", no_data_color="#102030"),
        lut=blue_white_red,
    )
    result = engine.run(_regions(), {"R2": 5.0, "R4": "bogus"})

    assert result.assignment["R1"] == (16, 32, 48)
    assert result.assignment["R4"] == (16, 32, 48)
    assert result.assignment.no_data == ("R1", "R3", "R4", "R5")


def test_range_comes_from_supplied_regions_only(blue_white_red):
    regions = _regions()[:2]
    measurements = {"R1": 0.0, "R2": 10.0, "unrelated": 1000.0}

    result = ColorCodingEngine(_config(), lut=blue_white_red).run(regions, measurements)

    assert result.value_range.maximum == 10.0


def test_range_override_is_shared_across_runs(blue_white_red):
    engine = ColorCodingEngine(_config(range_override=(0, 100)), lut=blue_white_red)

    first = engine.run(_regions()[:1], {"R1": 50.0})
    second = engine.run(_regions()[:1], {"R1": 50.0})

    assert first.value_range == second.value_range
    assert first.value_range.overridden
    assert first.assignment["R1"] == second.assignment["R1"] == (255, 255, 255)


def test_degenerate_measurements_use_midpoint_and_swatch(blue_white_red):
    engine = ColorCodingEngine(_config(), lut=blue_white_red)
    result = engine.run(_regions(), {f"R{i}": 4.2 for i in range(1, 6)})

    assert set(result.assignment.normalized.values()) == {0.5}
    assert result.legend.is_swatch
    assert result.legend.labels == ["4.2"]
    assert any("midpoint" in note for note in result.notes)


def test_invalid_range_leaves_canvas_untouched(blue_white_red):
    canvas = Image.new("RGB", (64, 12), (1, 2, 3))
    before = canvas.tobytes()
    engine = ColorCodingEngine(_config(), lut=blue_white_red)

    with pytest.raises(InvalidRangeError):
        engine.run(_regions(), {"R1": None, "R2": float("nan")}, canvas)

    assert canvas.tobytes() == before


def test_unknown_lut_leaves_canvas_untouched():
    canvas = Image.new("RGB", (64, 12), (1, 2, 3))
    before = canvas.tobytes()
    engine = ColorCodingEngine(_config(lut="no_such_palette"))

    with pytest.raises(InvalidLUTError):
        engine.run(_regions(), {"R1": 1.0, "R2": 2.0}, canvas)

    assert canvas.tobytes() == before


def test_unsupported_canvas_mode_is_rejected_before_painting(blue_white_red):
    canvas = Image.new("L", (64, 12), 7)
    engine = ColorCodingEngine(_config(), lut=blue_white_red)

    with pytest.raises(ValueError):
        engine.run(_regions(), {"R1": 1.0, "R2": 2.0}, canvas)


def test_lut_resolution_from_catalog_and_file(tmp_path: Path):
    reversed_fire = ColorCodingEngine(_config(lut="Fire", reverse_lut=True)).lut
    fire = get_lut("fire")
    assert reversed_fire.colors[0] == fire.colors[-1]
    assert reversed_fire.name == "fire (inverted)"

    lut_file = tmp_path / "two_tone.txt"
    lut_file.write_text("0 0 0\n255 255 0\n", encoding="utf-8")
    custom = ColorCodingEngine(_config(lut_path=lut_file)).lut
    assert custom.name == "two_tone"
    assert custom.colors == ((0, 0, 0), (255, 255, 0))


def test_integer_keys_reach_range_and_assignment(blue_white_red):
    regions = _regions()
    measurements = {index: float(index * 10) for index in range(1, 6)}
    named = [
        Region(id=str(index), points=region.points)
        for index, region in enumerate(regions, start=1)
    ]

    result = ColorCodingEngine(_config(), lut=blue_white_red).run(named, measurements)

    assert (result.value_range.minimum, result.value_range.maximum) == (10.0, 50.0)
    assert result.assignment["1"] == (0, 0, 255)
    assert result.assignment["5"] == (255, 0, 0)


def test_percentile_clamp_saturates_outliers(blue_white_red):
    regions = [Region(id=f"R{value}") for value in range(1, 101)]
    measurements = {f"R{value}": float(value) for value in range(1, 101)}

    result = ColorCodingEngine(
        _config(clamp_percentile=(5, 95)), lut=blue_white_red
    ).run(regions, measurements)

    assert result.value_range.minimum == pytest.approx(5.95)
    assert result.value_range.maximum == pytest.approx(95.05)
    for low in ("R1", "R3", "R5"):
        assert result.assignment[low] == (0, 0, 255)
        assert result.assignment.normalized[low] == 0.0
    for high in ("R96", "R99", "R100"):
        assert result.assignment[high] == (255, 0, 0)
        assert result.assignment.normalized[high] == 1.0
    assert 0.0 < result.assignment.normalized["R50"] < 1.0


def test_missing_region_is_painted_no_data_gray(blue_white_red):
    regions = _regions()
    measurements = {"R1": 10.0, "R2": 20.0, "R4": 40.0, "R5": 50.0}
    canvas = Image.new("RGB", (64, 12), (0, 0, 0))

    result = ColorCodingEngine(
        _config(no_data_policy="fixed_color"), lut=blue_white_red
    ).run(regions, measurements, canvas)

    assert result.assignment.no_data == ("R3",)
    assert canvas.getpixel((29, 5)) == (128, 128, 128)
    assert canvas.getpixel((5, 5)) == (0, 0, 255)
    assert canvas.getpixel((53, 5)) == (255, 0, 0)


def test_skipped_region_is_left_unpainted(blue_white_red):
    canvas = Image.new("RGB", (64, 12), (7, 7, 7))

    ColorCodingEngine(_config(), lut=blue_white_red).run(
        _regions(), {"R1": 1.0, "R5": 2.0}, canvas
    )

    assert canvas.getpixel((29, 5)) == (7, 7, 7)
