# Demand schedules for the end customer, one integer per week.

import numpy as np


def generate_constant_demand(weeks, value):
    """Same demand every week. Useful for checking that a policy settles."""
    return [value] * weeks


def generate_normal_demand(weeks, mean, std_dev, seed=None):
    """
    Weekly demand drawn from a normal distribution, rounded to whole units.
    Negative draws become zero since demand cannot be negative.
    """
    rng = np.random.default_rng(seed)
    samples = rng.normal(mean, std_dev, size=weeks)
    return [int(v) for v in np.clip(np.rint(samples), 0, None)]


def generate_classic_beer_game_demand(weeks, low=4, high=8, step_week=5):
    """
    The MIT beer game step: 'low' until step_week, then 'high' for the rest of the run.
    A single jump like this is enough to set off the bullwhip effect.
    """
    return [low if week < step_week else high for week in range(1, weeks + 1)]


def demand_statistics(schedule):
    """Mean and (population) standard deviation of a schedule, for target sizing."""
    if not schedule:
        return 0.0, 0.0
    values = np.asarray(schedule, dtype=float)
    return float(values.mean()), float(values.std())
