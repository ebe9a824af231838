"""Newsvendor target sizing."""

import math

import pytest

from optimization import (
    calculate_critical_ratio,
    inverse_normal_cdf,
    optimal_base_stock,
    round_half_up,
)


def test_critical_ratio():
    assert calculate_critical_ratio(1.0, 0.5) == pytest.approx(2 / 3)
    assert calculate_critical_ratio(0.0, 0.0) == 0.0
    assert calculate_critical_ratio(1.0, 1.0) == 0.5


@pytest.mark.parametrize("p, expected", [
    (0.5, 0.0),
    (0.8413, 0.9998),
    (0.9772, 1.9991),
    (0.95, 1.6449),
    (0.6667, 0.4309),
])
def test_inverse_normal_cdf_accuracy(p, expected):
    assert inverse_normal_cdf(p) == pytest.approx(expected, abs=1e-3)


@pytest.mark.parametrize("p", [0.01, 0.1, 0.3, 0.45])
def test_inverse_normal_cdf_is_symmetric(p):
    assert inverse_normal_cdf(p) == pytest.approx(-inverse_normal_cdf(1 - p))


def test_inverse_normal_cdf_caps_at_the_ends():
    assert inverse_normal_cdf(0.0) == -5.0
    assert inverse_normal_cdf(1.0) == 5.0
    assert inverse_normal_cdf(-0.2) == -5.0


def test_inverse_normal_cdf_is_increasing():
    ps = [0.05 * i for i in range(1, 20)]
    zs = [inverse_normal_cdf(p) for p in ps]
    assert zs == sorted(zs)


def test_no_variability_gives_mean_over_horizon():
    # lead time 4 -> horizon 5
    assert optimal_base_stock(1.0, 0.5, 4.0, 0.0, 4) == 20


def test_target_with_safety_stock():
    z = inverse_normal_cdf(2 / 3)
    expected = round_half_up(8.0 * 5 + z * 2.0 * math.sqrt(5))
    assert optimal_base_stock(1.0, 0.5, 8.0, 2.0, 4) == expected


def test_target_grows_with_backlog_cost():
    targets = [optimal_base_stock(b, 0.5, 8.0, 3.0, 4) for b in (0.1, 0.5, 1.0, 5.0, 20.0)]
    assert targets == sorted(targets)
    assert targets[0] < targets[-1]


def test_target_grows_with_horizon():
    targets = [optimal_base_stock(1.0, 0.5, 5.0, 2.0, lead) for lead in range(0, 8)]
    assert all(a < b for a, b in zip(targets, targets[1:]))


def test_target_never_negative():
    assert optimal_base_stock(0.01, 10.0, 0.5, 10.0, 1) == 0


def test_round_half_up():
    assert round_half_up(2.5) == 3
    assert round_half_up(3.5) == 4
    assert round_half_up(2.4) == 2
    assert round_half_up(-2.5) == -3
