import pytest

from roicoder.apps.roi_color_coder.core.models import SamplingMode
from roicoder.apps.roi_color_coder.core.sampler import sample, sample_many
from roicoder.libs.lut import InvalidLUTError, LookupTable


def test_endpoints_map_to_first_and_last_entries(blue_white_red):
    for mode in SamplingMode:
        assert sample(blue_white_red, 0.0, mode) == (0, 0, 255)
        assert sample(blue_white_red, 1.0, mode) == (255, 0, 0)


def test_discrete_rounds_half_up(blue_white_red):
    # floor(t * (N - 1) + 0.5) with N = 3
    assert sample(blue_white_red, 0.24, "discrete") == (0, 0, 255)
    assert sample(blue_white_red, 0.25, "discrete") == (255, 255, 255)
    assert sample(blue_white_red, 0.74, "discrete") == (255, 255, 255)
    assert sample(blue_white_red, 0.75, "discrete") == (255, 0, 0)


def test_continuous_interpolates_between_bracketing_entries(blue_white_red):
    assert sample(blue_white_red, 0.5, "continuous") == (255, 255, 255)
    assert sample(blue_white_red, 0.25, "continuous") == (128, 128, 255)
    assert sample(blue_white_red, 0.75, "continuous") == (255, 128, 128)


def test_out_of_range_positions_are_clamped(blue_white_red):
    assert sample(blue_white_red, -3.0) == (0, 0, 255)
    assert sample(blue_white_red, 7.5) == (255, 0, 0)
    assert sample(blue_white_red, float("nan")) == (0, 0, 255)


def test_sample_is_deterministic_and_matches_vectorized_form(blue_white_red):
    positions = [index / 99 for index in range(100)]
    for mode in SamplingMode:
        first = sample_many(blue_white_red, positions, mode)
        second = sample_many(blue_white_red, positions, mode)
        assert first == second
        assert first == [sample(blue_white_red, t, mode) for t in positions]


def test_two_entry_lut_continuous_is_linear():
    lut = LookupTable.from_colors("ramp", [(0, 0, 0), (200, 100, 50)])
    assert sample(lut, 0.5) == (100, 50, 25)
    assert sample(lut, 0.1) == (20, 10, 5)


def test_sample_many_empty_input(blue_white_red):
    assert sample_many(blue_white_red, [], "continuous") == []


def test_rejects_non_lut_and_unknown_mode(blue_white_red):
    with pytest.raises(InvalidLUTError):
        sample([(0, 0, 0), (255, 255, 255)], 0.5)  # type: ignore[arg-type]
    with pytest.raises(ValueError):
        sample(blue_white_red, 0.5, "nearest")
