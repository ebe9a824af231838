"""Formula and clamping checks for every ordering policy."""

import pytest

from config import ConfigurationError, SimulationConfig
from optimization import optimal_base_stock
from order_policies import (
    BaseStockPolicy,
    NaivePolicy,
    OrderContext,
    RandomPolicy,
    SmoothingPolicy,
    StermanHeuristic,
    VMIPolicy,
    build_policy,
)


@pytest.mark.parametrize("inventory, backlog, demand, supply_line", [
    (0, 0, 0, 0),
    (15, 0, 4, 0),
    (0, 30, 9, 12),
    (100, 0, 1, 50),
])
def test_naive_orders_incoming_demand(inventory, backlog, demand, supply_line):
    assert NaivePolicy().calculate_order(inventory, backlog, demand, supply_line) == demand


def test_random_stays_in_range_and_is_seeded():
    a = RandomPolicy(2, 6, seed=11)
    b = RandomPolicy(2, 6, seed=11)
    orders_a = [a.calculate_order(0, 0, 0, 0) for _ in range(50)]
    orders_b = [b.calculate_order(0, 0, 0, 0) for _ in range(50)]
    assert orders_a == orders_b
    assert all(2 <= o <= 6 for o in orders_a)


def test_random_single_value_range():
    assert RandomPolicy(3, 3).calculate_order(10, 0, 5, 0) == 3


@pytest.mark.parametrize("low, high", [(5, 4), (-1, 3)])
def test_random_rejects_bad_range(low, high):
    with pytest.raises(ConfigurationError):
        RandomPolicy(low, high)


def test_base_stock_covers_demand_and_gap():
    policy = BaseStockPolicy(15)
    # position = 11 - 0 + 0, gap 4, demand 4
    assert policy.calculate_order(11, 0, 4, 0) == 8
    # position = 7 + 8 = 15, gap 0
    assert policy.calculate_order(7, 0, 4, 8) == 4
    # backlog lowers the position: 0 - 3 + 10 = 7, gap 8
    assert policy.calculate_order(0, 3, 4, 10) == 12


def test_base_stock_clamps_when_overstocked():
    assert BaseStockPolicy(15).calculate_order(40, 0, 4, 10) == 0


def test_base_stock_optimal_target():
    config = SimulationConfig()
    policy = BaseStockPolicy.with_optimal_target(config, 8.0, 2.0)
    assert policy.target_stock == optimal_base_stock(1.0, 0.5, 8.0, 2.0, 4)


def test_sterman_defaults():
    policy = StermanHeuristic(15)
    assert policy.target_supply_line == 7
    assert policy.alpha == 1.0
    assert policy.beta == 0.2


def test_sterman_weighs_two_gaps():
    policy = StermanHeuristic(15, target_supply_line=10, alpha=1.0, beta=0.2)
    # 4 + 1.0 * (15 - 10) + 0.2 * (10 - 0) = 11
    assert policy.calculate_order(10, 0, 4, 0) == 11
    # 4 + (15 - (-2)) + 0.2 * (10 - 5) = 22
    assert policy.calculate_order(0, 2, 4, 5) == 22


def test_sterman_rounds_half_up():
    policy = StermanHeuristic(10, target_supply_line=0, alpha=0.5, beta=0.0)
    # 4 + 0.5 * (10 - 9) = 4.5
    assert policy.calculate_order(9, 0, 4, 0) == 5


def test_sterman_clamps_negative():
    assert StermanHeuristic(5).calculate_order(50, 0, 0, 30) == 0


def test_sterman_optimal_target_splits_base_stock():
    config = SimulationConfig()
    policy = StermanHeuristic.with_optimal_target(config, 4.0, 0.0)
    # total 20 over a horizon of 5, pipeline 16 over the lead time of 4
    assert policy.target_supply_line == 16
    assert policy.target_inventory == 4


def test_smoothing_updates_forecast():
    policy = SmoothingPolicy(4, 0.5, 15)
    # avg = 0.5*8 + 0.5*4 = 6; position = 15; correction 0 -> 6
    assert policy.calculate_order(15, 0, 8, 0) == 6
    assert policy.avg_demand == pytest.approx(6.0)
    # avg = 0.5*8 + 0.5*6 = 7; position = 5; correction 5 -> 12
    assert policy.calculate_order(5, 0, 8, 0) == 12
    assert policy.avg_demand == pytest.approx(7.0)


def test_smoothing_clamps_negative():
    assert SmoothingPolicy(0, 0.5, 0).calculate_order(100, 0, 0, 0) == 0


@pytest.mark.parametrize("gamma", [0, 1, -0.1, 1.5])
def test_smoothing_rejects_bad_gamma(gamma):
    with pytest.raises(ConfigurationError):
        SmoothingPolicy(4, gamma, 15)


def test_smoothing_state_is_per_instance():
    first = SmoothingPolicy(4, 0.5, 15)
    second = SmoothingPolicy(4, 0.5, 15)
    first.calculate_order(15, 0, 20, 0)
    assert second.avg_demand == 4.0


def test_vmi_uses_downstream_state_when_visible():
    policy = VMIPolicy(15)
    context = OrderContext(downstream_inventory=5, downstream_backlog=2)
    # downstream gap 15 - 3 = 12, own gap 15 - 10 = 5
    assert policy.calculate_order(10, 0, 4, 0, context) == 17


def test_vmi_treats_zero_visibility_as_known():
    policy = VMIPolicy(15)
    context = OrderContext(downstream_inventory=0, downstream_backlog=0)
    assert policy.calculate_order(15, 0, 4, 0, context) == 15


def test_vmi_falls_back_to_base_stock():
    policy = VMIPolicy(15)
    base = BaseStockPolicy(15)
    for args in [(10, 0, 4, 0), (0, 5, 8, 3), (30, 0, 2, 0)]:
        assert policy.calculate_order(*args) == base.calculate_order(*args)
        assert policy.calculate_order(*args, OrderContext(actual_customer_demand=9)) == base.calculate_order(*args)


def test_vmi_partial_visibility_is_no_visibility():
    policy = VMIPolicy(15)
    context = OrderContext(downstream_inventory=3)
    assert policy.calculate_order(10, 0, 4, 0, context) == BaseStockPolicy(15).calculate_order(10, 0, 4, 0)


def test_vmi_clamps_negative():
    context = OrderContext(downstream_inventory=50, downstream_backlog=0)
    assert VMIPolicy(15).calculate_order(40, 0, 4, 0, context) == 0


def test_build_policy():
    policy = build_policy("base_stock", target_stock=12)
    assert isinstance(policy, BaseStockPolicy)
    assert policy.target_stock == 12
    assert build_policy("naive") is not build_policy("naive")


def test_build_policy_unknown_name():
    with pytest.raises(ConfigurationError):
        build_policy("clairvoyant")


def test_negative_targets_rejected():
    with pytest.raises(ConfigurationError):
        BaseStockPolicy(-1)
    with pytest.raises(ConfigurationError):
        VMIPolicy(5, downstream_target=-2)
