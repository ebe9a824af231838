# Beer Distribution Game: command-line runner
# Wires policies to stages, runs the chain, exports the history and reports costs.

import argparse
import logging
import sys

import demand
from chain_simulation import ChainSimulation
from config import load_config
from metrics_logger import MetricsLogger
from order_policies import (
    BaseStockPolicy,
    NaivePolicy,
    RandomPolicy,
    SmoothingPolicy,
    StermanHeuristic,
    VMIPolicy,
)

logger = logging.getLogger("beer_game")

SCENARIOS = ["rational", "one-rational", "chaos", "optimal"]
DEMAND_PATTERNS = ["step", "constant", "normal"]


def setup_logging(level="INFO"):
    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stdout,
    )
    logging.getLogger().setLevel(level)


def build_demand(pattern, weeks, seed=None):
    if pattern == "constant":
        return demand.generate_constant_demand(weeks, 4)
    if pattern == "normal":
        return demand.generate_normal_demand(weeks, 8.0, 2.0, seed=seed)
    return demand.generate_classic_beer_game_demand(weeks)


def build_policies(scenario, config, schedule, seed=None):
    """Four fresh policies, Retailer first."""
    if scenario == "rational":
        # Everyone keeps an order-up-to level of 15
        return [BaseStockPolicy(15) for _ in range(4)]
    if scenario == "chaos":
        return [
            NaivePolicy(),                  # Retailer just passes demand on
            BaseStockPolicy(20),            # Wholesaler hoards
            RandomPolicy(0, 15, seed=seed), # Distributor is unpredictable
            BaseStockPolicy(15),            # Manufacturer is rational
        ]
    if scenario == "optimal":
        mean, std_dev = demand.demand_statistics(schedule)
        return [
            BaseStockPolicy.with_optimal_target(config, mean, std_dev),
            StermanHeuristic.with_optimal_target(config, mean, std_dev),
            SmoothingPolicy.with_optimal_target(mean, 0.3, config, mean, std_dev),
            VMIPolicy.with_optimal_target(config, mean, std_dev),
        ]
    # one-rational: a rational retailer, the rest pass orders straight through
    return [BaseStockPolicy(15), NaivePolicy(), NaivePolicy(), NaivePolicy()]


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Four-stage beer distribution game simulation")
    parser.add_argument("--config", default=None, help="Path to a JSON configuration file")
    parser.add_argument("--scenario", choices=SCENARIOS, default="one-rational")
    parser.add_argument("--demand", choices=DEMAND_PATTERNS, default="step")
    parser.add_argument("--output", default="simulation_results.csv", help="CSV file for the weekly history")
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--log-level", default="INFO")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    setup_logging(args.log_level.upper())

    config = load_config(args.config)
    schedule = build_demand(args.demand, config.max_weeks, seed=args.seed)
    logger.info("Demand schedule: %s", schedule)

    policies = build_policies(args.scenario, config, schedule, seed=args.seed)
    sim = ChainSimulation(config, schedule, policies)
    sim.run()

    metrics = MetricsLogger.from_simulation(sim)
    metrics.to_csv(args.output)
    logger.info("Exported %d rows to %s", len(sim.history), args.output)

    for stage, cost in sim.cost_breakdown():
        logger.info("%s: $%.2f", stage, cost)
    logger.info("Total supply chain cost: $%.2f", sim.total_supply_chain_cost())

    for stage, ratio in metrics.bullwhip_ratios(schedule).items():
        logger.info("Bullwhip ratio %s: %.2f", stage, ratio)
    return sim


if __name__ == "__main__":
    main()
