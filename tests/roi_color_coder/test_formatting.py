import pytest

from roicoder.apps.roi_color_coder.core.formatting import LabelFormatter


def test_integral_ticks_have_no_decimals():
    assert LabelFormatter().format_all([10.0, 30.0, 50.0]) == ["10", "30", "50"]


def test_auto_decimals_use_shared_precision():
    labels = LabelFormatter().format_all([0.0, 0.25, 0.5])
    assert labels == ["0.00", "0.25", "0.50"]


def test_auto_decimals_are_capped():
    assert LabelFormatter().format(1 / 3) == "0.333333"


def test_large_magnitudes_switch_to_scientific():
    labels = LabelFormatter().format_all([0.0, 125000.0, 250000.0])
    assert labels == ["0.00e+00", "1.25e+05", "2.50e+05"]


def test_tiny_magnitudes_switch_to_scientific():
    assert LabelFormatter().format_all([0.0, 1e-8]) == ["0.00e+00", "1.00e-08"]


def test_explicit_decimals_and_notation():
    assert LabelFormatter(decimal_places=1).format(3.14159) == "3.1"
    assert LabelFormatter(scientific=False).format(1e6) == "1000000"
    assert LabelFormatter(decimal_places=3, scientific=True).format(1234.0) == "1.234e+03"


def test_negative_zero_is_printed_without_sign():
    assert LabelFormatter(decimal_places=2).format(-0.001) == "0.00"
    assert LabelFormatter().format(-0.0) == "0"


def test_negative_decimals_are_rejected():
    with pytest.raises(ValueError):
        LabelFormatter(decimal_places=-1)


def test_empty_input():
    assert LabelFormatter().format_all([]) == []


def test_automatic_scientific_keeps_narrow_ticks_distinct():
    values = [100000.0, 100001.0, 100002.0, 100003.0, 100004.0]

    labels = LabelFormatter().format_all(values)

    assert len(set(labels)) == len(values)
    assert labels[0] == "1.00000e+05"
    assert labels[1] == "1.00001e+05"


def test_repeated_values_do_not_inflate_mantissa():
    assert LabelFormatter().format_all([2.5e5, 2.5e5]) == ["2.50e+05", "2.50e+05"]
