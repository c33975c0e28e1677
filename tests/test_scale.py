"""Tests for the time and value scales."""

import pytest

from graphframe.dataset import Point
from graphframe.errors import DegenerateScaleError
from graphframe.scale import LinearScale, build_scales


def _points(*pairs):
    return [Point(t, v) for t, v in pairs]


def test_time_scale_spans_plot_width() -> None:
    scales = build_scales(_points((100, 1), (200, 5), (300, 3)), None, 400, 200, left=10, top=5)
    assert scales.x(100) == 10
    assert scales.x(300) == 410
    assert scales.x(200) == 210


def test_value_scale_is_inverted() -> None:
    scales = build_scales(_points((0, 1), (10, 5)), None, 100, 200, top=5)
    assert scales.y(1) == 205
    assert scales.y(5) == 5
    assert scales.y(3) == 105


def test_scales_are_monotonic() -> None:
    scales = build_scales(_points((0, -4), (50, 8), (100, 2)), None, 300, 150)
    xs = [scales.x(t) for t in range(0, 101, 10)]
    ys = [scales.y(v) for v in range(-4, 9)]
    assert xs == sorted(xs)
    assert ys == sorted(ys, reverse=True)


def test_explicit_range_replaces_point_extrema() -> None:
    scales = build_scales(_points((0, 10), (60, 20)), (0, 100), 100, 200)
    assert (scales.min_value, scales.max_value) == (0, 100)
    assert scales.y(0) == 200
    assert scales.y(100) == 0
    assert scales.y(10) == pytest.approx(180)


def test_single_point_maps_to_plot_center(caplog) -> None:
    scales = build_scales(_points((50, 7)), None, 100, 60)
    assert scales.x(50) == 50
    assert scales.y(7) == 30
    assert 'centering' in caplog.text


def test_degenerate_scale_cannot_invert() -> None:
    scale = LinearScale((5, 5), (0, 100))
    assert scale.degenerate
    with pytest.raises(DegenerateScaleError):
        scale.invert(50)


def test_invert_recovers_domain_value() -> None:
    scale = LinearScale((0, 3600), (0, 540))
    assert scale.invert(scale(900)) == pytest.approx(900)


def test_no_points_is_rejected() -> None:
    with pytest.raises(DegenerateScaleError):
        build_scales([], None, 100, 100)


def test_value_ticks_are_round_numbers() -> None:
    scale = LinearScale((0, 100), (225, 0))
    assert scale.ticks(10) == [0, 10, 20, 30, 40, 50, 60, 70, 80, 90, 100]
    assert scale.tick_format(10)(50) == '50'


def test_value_ticks_for_fractional_domain() -> None:
    scale = LinearScale((0, 1), (100, 0))
    ticks = scale.ticks(10)
    assert len(ticks) == 11
    assert ticks[5] == 0.5
    assert scale.tick_format(10)(0.5) == '0.5'


def test_value_ticks_step_by_five_and_group_thousands() -> None:
    scale = LinearScale((0, 5000), (100, 0))
    assert scale.ticks(10) == [i * 500 for i in range(11)]
    assert scale.tick_format(10)(1500) == '1,500'


def test_value_ticks_stay_inside_domain() -> None:
    scale = LinearScale((3.7, 18.2), (100, 0))
    assert all(3.7 <= t <= 18.2 for t in scale.ticks(10))


def test_degenerate_domain_has_single_tick() -> None:
    assert LinearScale((5, 5), (0, 100)).ticks() == [5]


def test_degenerate_domain_tick_shows_exact_value() -> None:
    scale = LinearScale((3.5, 3.5), (0, 100))
    fmt = scale.tick_format(10)
    assert [fmt(t) for t in scale.ticks(10)] == ['3.5']


def test_overflowing_span_falls_back_to_single_tick() -> None:
    scale = LinearScale((-1e308, 1e308), (100, 0))
    assert scale.ticks(10) == [-1e308]
