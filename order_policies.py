# Order policies: the interchangeable "brains" of supply chain agents.
# Every policy answers one question: how much to order from upstream this week.

import random
from dataclasses import dataclass
from typing import Optional

from config import ConfigurationError
from optimization import optimal_base_stock, round_half_up


# -----------------------------
# Decision context
# -----------------------------
@dataclass
class OrderContext:
    """
    Extra visibility handed to a policy. None means "not visible", which is
    different from a visible value of zero.
    """
    downstream_inventory:   Optional[int] = None
    downstream_backlog:     Optional[int] = None
    actual_customer_demand: Optional[int] = None

    @property
    def has_downstream_visibility(self):
        return self.downstream_inventory is not None and self.downstream_backlog is not None


EMPTY_CONTEXT = OrderContext()


class OrderPolicy:
    """Minimal interface implemented by all ordering policies."""

    def calculate_order(self, inventory, backlog, incoming_demand, supply_line, context=None):
        raise NotImplementedError


def _check_target(name, value):
    if value < 0:
        raise ConfigurationError(f"{name} cannot be negative, got {value}")


def _optimal_target(config, avg_demand, std_dev_demand):
    return optimal_base_stock(
        config.backlog_cost,
        config.holding_cost,
        avg_demand,
        std_dev_demand,
        config.lead_time,
    )


# -----------------------------
# 1. Naive (pass-through)
# -----------------------------
class NaivePolicy(OrderPolicy):
    """Orders exactly what was demanded, ignoring stock and backlog."""

    def calculate_order(self, inventory, backlog, incoming_demand, supply_line, context=None):
        return incoming_demand

    def __repr__(self):
        return "NaivePolicy()"


# -----------------------------
# 2. Random
# -----------------------------
class RandomPolicy(OrderPolicy):
    """Orders a uniform random amount in [min_order, max_order]."""

    def __init__(self, min_order, max_order, seed=None):
        if min_order < 0:
            raise ConfigurationError(f"min_order cannot be negative, got {min_order}")
        if min_order > max_order:
            raise ConfigurationError(f"min_order ({min_order}) must not exceed max_order ({max_order})")
        self.min_order = min_order
        self.max_order = max_order
        self.rng = random.Random(seed)

    def calculate_order(self, inventory, backlog, incoming_demand, supply_line, context=None):
        return self.rng.randint(self.min_order, self.max_order)

    def __repr__(self):
        return f"RandomPolicy({self.min_order}, {self.max_order})"


# -----------------------------
# 3. Base stock (order-up-to)
# -----------------------------
class BaseStockPolicy(OrderPolicy):
    """
    Keeps the net inventory position (inventory - backlog + supply line)
    at a target. Order = demand + (target - position), never below zero.
    Counting the supply line stops goods already on the way from being ordered twice.
    """

    def __init__(self, target_stock):
        _check_target("target_stock", target_stock)
        self.target_stock = target_stock

    @classmethod
    def with_optimal_target(cls, config, avg_demand, std_dev_demand):
        return cls(_optimal_target(config, avg_demand, std_dev_demand))

    def calculate_order(self, inventory, backlog, incoming_demand, supply_line, context=None):
        net_position = inventory - backlog + supply_line
        gap = self.target_stock - net_position
        return max(0, incoming_demand + gap)

    def __repr__(self):
        return f"BaseStockPolicy({self.target_stock})"


# -----------------------------
# 4. Sterman heuristic
# -----------------------------
class StermanHeuristic(OrderPolicy):
    """
    Anchor-and-adjust rule from Sterman's beer game experiments:

        order = demand + alpha * (target_inventory - net_inventory)
                       + beta  * (target_supply_line - supply_line)

    A beta well below alpha reproduces the human habit of underweighting
    goods already ordered, which drives oscillation and overshoot.
    """

    def __init__(self, target_inventory, target_supply_line=None, alpha=1.0, beta=0.2):
        if target_supply_line is None:
            target_supply_line = target_inventory // 2
        _check_target("target_supply_line", target_supply_line)
        self.target_inventory = target_inventory
        self.target_supply_line = target_supply_line
        self.alpha = alpha
        self.beta = beta

    @classmethod
    def with_optimal_target(cls, config, avg_demand, std_dev_demand, alpha=1.0, beta=0.2):
        """
        Split the optimal base stock into a pipeline part (expected demand
        over the lead time) and an on-hand part (the remainder).
        """
        total_base_stock = _optimal_target(config, avg_demand, std_dev_demand)
        pipeline_target = int(round_half_up(avg_demand * config.lead_time))
        inventory_target = total_base_stock - pipeline_target
        return cls(inventory_target, pipeline_target, alpha=alpha, beta=beta)

    def calculate_order(self, inventory, backlog, incoming_demand, supply_line, context=None):
        net_inventory = inventory - backlog
        inventory_gap = self.target_inventory - net_inventory
        supply_line_gap = self.target_supply_line - supply_line

        order = incoming_demand + self.alpha * inventory_gap + self.beta * supply_line_gap
        if order < 0:
            return 0
        return int(round_half_up(order))

    def __repr__(self):
        return (f"StermanHeuristic({self.target_inventory}, {self.target_supply_line}, "
                f"alpha={self.alpha}, beta={self.beta})")


# -----------------------------
# 5. Exponential smoothing
# -----------------------------
class SmoothingPolicy(OrderPolicy):
    """
    Orders against a smoothed demand forecast instead of the raw last order.
    The forecast is updated on every call, so an instance must belong to one agent.
    """

    def __init__(self, initial_demand, gamma, target_stock):
        if not 0 < gamma < 1:
            raise ConfigurationError(f"gamma must lie strictly between 0 and 1, got {gamma}")
        _check_target("target_stock", target_stock)
        self.avg_demand = float(initial_demand)
        self.gamma = gamma
        self.target_stock = target_stock

    @classmethod
    def with_optimal_target(cls, initial_demand, gamma, config, avg_demand, std_dev_demand):
        return cls(initial_demand, gamma, _optimal_target(config, avg_demand, std_dev_demand))

    def calculate_order(self, inventory, backlog, incoming_demand, supply_line, context=None):
        self.avg_demand = self.gamma * incoming_demand + (1 - self.gamma) * self.avg_demand

        position = (inventory - backlog) + supply_line
        # Inventory correction is damped by gamma as well
        correction = (self.target_stock - position) * self.gamma

        order = self.avg_demand + correction
        if order < 0:
            return 0
        return int(round_half_up(order))

    def __repr__(self):
        return f"SmoothingPolicy(gamma={self.gamma}, target={self.target_stock})"


# -----------------------------
# 6. Vendor-managed inventory
# -----------------------------
class VMIPolicy(OrderPolicy):
    """
    Replenishes on the downstream partner's behalf using its true inventory
    and backlog instead of its (distorted) orders. Without that visibility
    it behaves like a plain base-stock policy on its own state.
    """

    def __init__(self, target_stock, downstream_target=None):
        if downstream_target is None:
            downstream_target = target_stock
        _check_target("target_stock", target_stock)
        _check_target("downstream_target", downstream_target)
        self.target_stock_own = target_stock
        self.target_stock_downstream = downstream_target

    @classmethod
    def with_optimal_target(cls, config, avg_demand, std_dev_demand):
        return cls(_optimal_target(config, avg_demand, std_dev_demand))

    def calculate_order(self, inventory, backlog, incoming_demand, supply_line, context=None):
        context = context or EMPTY_CONTEXT
        own_net = inventory - backlog + supply_line
        own_gap = self.target_stock_own - own_net

        if context.has_downstream_visibility:
            downstream_net = context.downstream_inventory - context.downstream_backlog
            downstream_gap = self.target_stock_downstream - downstream_net
            return max(0, downstream_gap + own_gap)

        return max(0, incoming_demand + own_gap)

    def __repr__(self):
        return f"VMIPolicy({self.target_stock_own}, downstream_target={self.target_stock_downstream})"


# -----------------------------
# Factory
# -----------------------------
POLICY_TYPES = {
    "naive": NaivePolicy,
    "random": RandomPolicy,
    "base_stock": BaseStockPolicy,
    "sterman": StermanHeuristic,
    "smoothing": SmoothingPolicy,
    "vmi": VMIPolicy,
}


def build_policy(name, **params):
    """Create a fresh policy instance by name, e.g. build_policy("base_stock", target_stock=15)."""
    try:
        policy_type = POLICY_TYPES[name]
    except KeyError:
        raise ConfigurationError(
            f"Unknown policy '{name}'. Expected one of: {', '.join(sorted(POLICY_TYPES))}"
        ) from None
    return policy_type(**params)
