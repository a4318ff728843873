"""30-day constant maturity interpolation for VIX computation.

Per Cboe VIX methodology, interpolate between near-term and next-term
variance to produce a constant 30-day variance estimate, in minutes:

    VIX = 100 * sqrt({ T1*σ1^2 * [(N_T2 - N_30)/(N_T2 - N_T1)]
                     + T2*σ2^2 * [(N_30 - N_T1)/(N_T2 - N_T1)] } * N_365/N_30)

Equal expirations (N_T1 == N_T2) make the weights undefined; the result
is then inf or nan rather than an exception.
"""

from datetime import datetime
from typing import Optional

import numpy as np

from options_vix.config import MINUTES_30_DAYS, MINUTES_PER_YEAR
from options_vix.vix.contracts import Percentage
from options_vix.vix.expiry import ExpiryGroup


def interpolate_30d_variance(
    t_near: float,
    n_near: float,
    var_near: float,
    t_next: float,
    n_next: float,
    var_next: float,
    target_minutes: float = MINUTES_30_DAYS,
    minutes_per_year: float = MINUTES_PER_YEAR,
) -> float:
    """Interpolate to constant-maturity annualized variance.

    Args:
        t_near: Near-term time to expiry (years)
        n_near: Near-term minutes to expiry
        var_near: Near-term variance (sigma^2)
        t_next: Next-term time to expiry (years)
        n_next: Next-term minutes to expiry
        var_next: Next-term variance (sigma^2)
        target_minutes: Constant maturity horizon (N_30)
        minutes_per_year: Annualization base (N_365)

    Returns:
        Interpolated variance; non-finite if n_near == n_next
    """
    n1 = np.float64(n_near)
    n2 = np.float64(n_next)
    n30 = np.float64(target_minutes)
    n365 = np.float64(minutes_per_year)

    with np.errstate(divide="ignore", invalid="ignore"):
        denom = n2 - n1
        w_near = (n2 - n30) / denom
        w_next = (n30 - n1) / denom
        var_30d = (t_near * var_near * w_near + t_next * var_next * w_next) * n365 / n30

    return float(var_30d)


def compute_vix_index(var_30d: float) -> Percentage:
    """Convert 30-day variance to a VIX-style percentage.

    Negative or nan variance gives nan; callers decide how to report it.
    """
    with np.errstate(invalid="ignore"):
        return float(np.sqrt(np.float64(var_30d)) * 100.0)


def compute_vix(
    near_term: ExpiryGroup,
    next_term: ExpiryGroup,
    now: datetime,
    target_minutes: float = MINUTES_30_DAYS,
    minutes_per_year: Optional[float] = None,
) -> Percentage:
    """Blend two expiries into a VIX-style index.

    The caller guarantees near_term expires before next_term. T1 and T2
    come from each group's own minutes_per_year, so N_365 defaults to the
    near group's basis to keep the blend on one year length.

    Args:
        near_term: Nearer expiry chain
        next_term: Later expiry chain
        now: Snapshot time
        target_minutes: Constant maturity horizon (default 30 days)
        minutes_per_year: Annualization base (default: near_term.minutes_per_year)

    Returns:
        Index as a percentage (22.5 means 22.5%); may be inf or nan
    """
    if minutes_per_year is None:
        minutes_per_year = near_term.minutes_per_year

    var_30d = interpolate_30d_variance(
        t_near=near_term.time_to_expiration(now),
        n_near=near_term.minutes_to_expiration(now),
        var_near=near_term.variance(now),
        t_next=next_term.time_to_expiration(now),
        n_next=next_term.minutes_to_expiration(now),
        var_next=next_term.variance(now),
        target_minutes=target_minutes,
        minutes_per_year=minutes_per_year,
    )
    return compute_vix_index(var_30d)
