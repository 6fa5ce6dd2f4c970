"""Unit tests for the statistics engine."""

from __future__ import annotations

import pytest

from models.records import Reading
from services.stats import FieldStats, compute_stats, stats


def _reading(timestamp: int, **values: float) -> Reading:
    """Helper to build deterministic sensor readings."""

    return Reading(timestamp=timestamp, device_id="d1", **values)


def test_stats_of_absent_field_is_defined_zero() -> None:
    readings = [_reading(2, temperature=20.0), _reading(1, temperature=21.0)]

    result = stats("soil_moisture", readings)

    assert result == FieldStats(min=0.0, max=0.0, avg=0.0, count=0)


def test_stats_of_empty_set_is_defined_zero() -> None:
    assert stats("humidity", []) == FieldStats()


def test_stats_skip_missing_values_instead_of_zero_filling() -> None:
    readings = [
        _reading(3, humidity=50.0),
        _reading(2),
        _reading(1, humidity=60.0),
    ]

    result = stats("humidity", readings)

    assert result.min == 50.0
    assert result.max == 60.0
    assert result.avg == 55.0
    assert result.count == 2


def test_stats_rounds_to_one_decimal() -> None:
    readings = [
        _reading(3, temperature=20.04),
        _reading(2, temperature=21.0),
        _reading(1, temperature=22.16),
    ]

    result = stats("temperature", readings)

    assert result.min == 20.0
    assert result.max == 22.2
    assert result.avg == 21.1


def test_compute_stats_keeps_full_precision() -> None:
    readings = [_reading(2, light_lux=1.0), _reading(1, light_lux=2.0), _reading(0, light_lux=2.0)]

    result = compute_stats("light_lux", readings)

    assert result.avg == pytest.approx(5.0 / 3.0)
    assert result.rounded().avg == 1.7


def test_average_lies_between_min_and_max() -> None:
    values = [12.5, 48.0, 33.3, 7.9, 19.1]
    readings = [_reading(index, soil_moisture=value) for index, value in enumerate(values)]

    result = stats("soil_moisture", readings)

    assert result.min <= result.avg <= result.max
    assert result.min == 7.9
    assert result.max == 48.0


def test_unknown_field_is_rejected() -> None:
    with pytest.raises(ValueError):
        stats("pressure", [_reading(1)])


@pytest.mark.parametrize("value, repeats", [(25.89, 8), (35.8, 10), (71.97, 12)])
def test_repeated_identical_values_keep_average_within_range(value: float, repeats: int) -> None:
    readings = [_reading(index, humidity=value) for index in range(repeats)]

    result = compute_stats("humidity", readings)

    assert result.min == value
    assert result.max == value
    assert result.avg == value
    assert result.min <= result.avg <= result.max
