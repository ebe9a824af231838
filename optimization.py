# Optimal base-stock sizing (Newsvendor model)
# Turns holding/backlog costs and demand statistics into an order-up-to level.

import math


def round_half_up(value):
    """Round to the nearest integer, halves away from zero."""
    if value < 0:
        return -math.floor(-value + 0.5)
    return math.floor(value + 0.5)


def calculate_critical_ratio(backlog_cost, holding_cost):
    """
    Target service level balancing overstock against understock.
    CR = b / (b + h), or 0 when both costs are zero.
    """
    if backlog_cost + holding_cost == 0:
        return 0.0
    return backlog_cost / (backlog_cost + holding_cost)


def inverse_normal_cdf(p):
    """
    Approximate standard-normal quantile (Abramowitz and Stegun 26.2.23).
    Absolute error is below 4.5e-4. Probabilities at or beyond the ends are capped at +/-5 sigma.
    """
    if p >= 1.0:
        return 5.0
    if p <= 0.0:
        return -5.0
    if p == 0.5:
        return 0.0

    # The rational approximation holds for 0 < q <= 0.5; mirror the upper half
    q = p if p < 0.5 else 1.0 - p
    t = math.sqrt(-2.0 * math.log(q))

    c0, c1, c2 = 2.515517, 0.802853, 0.010328
    d1, d2, d3 = 1.432788, 0.189269, 0.001308

    numerator = c0 + c1 * t + c2 * t * t
    denominator = 1.0 + d1 * t + d2 * t * t + d3 * t * t * t
    x = t - numerator / denominator

    return -x if p < 0.5 else x


def optimal_base_stock(backlog_cost, holding_cost, avg_period_demand, std_dev_period_demand, lead_time_periods):
    """
    Order-up-to level covering demand over the risk horizon.

    The risk horizon is lead time plus one review period: goods ordered now
    must last until the next order can arrive. With i.i.d. weekly demand:

        target = mu * H + z * sigma * sqrt(H),   H = lead_time_periods + 1

    where z is the quantile of the critical ratio. Negative targets become 0.
    """
    critical_ratio = calculate_critical_ratio(backlog_cost, holding_cost)
    z_score = inverse_normal_cdf(critical_ratio)

    risk_horizon = lead_time_periods + 1
    mu_l = avg_period_demand * risk_horizon
    sigma_l = std_dev_period_demand * math.sqrt(risk_horizon)

    target_stock = mu_l + z_score * sigma_l
    if target_stock < 0:
        return 0
    return int(round_half_up(target_stock))
