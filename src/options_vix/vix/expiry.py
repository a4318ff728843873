"""Single-expiry option chain: time to expiry, forward price and variance.

Forward price via put-call parity:
1. Find K* = strike where |C_mid - P_mid| is minimized
2. F = K* + exp(rT) * (C_mid(K*) - P_mid(K*))

Model-free variance (per expiry T):

    sigma2(T) = (2/T) * sum[(delta_K / K^2) * exp(rT) * Q(K)] - (1/T) * (F/K0 - 1)^2

Where:
- K0 = highest strike strictly below F
- Q(K) = put mark for K < K0, call mark for K >= F, and both marks at K0
- strikes, delta_K and quotes are converted from cents to dollars

Degenerate chains (no strikes, T = 0) are not rejected here: the result
is whatever the formula yields (0, inf or nan). Callers sanitize.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Sequence

import numpy as np

from options_vix.config import DEFAULT_RISK_FREE_RATE, DROP_ZERO_BIDS, MINUTES_PER_YEAR
from options_vix.vix.contracts import Cents, OptionContract, Percentage
from options_vix.vix.strikes import OptionStrike, get_strikes


@dataclass
class ForwardResult:
    """Result of forward price computation."""

    # Forward price F (cents)
    forward: Cents

    # The strike K* where |call - put| is minimized (None if no strikes)
    k_star: Optional[Cents]

    # Call and put marks at K*
    c_mid_at_k_star: Optional[Cents]
    p_mid_at_k_star: Optional[Cents]

    # Absolute parity difference at K*
    parity_diff: Optional[Cents]

    # exp(rT)
    interest: float

    # Number of strikes with valid C/P pairs
    n_valid_strikes: int


@dataclass
class VarianceResult:
    """Result of variance computation for a single expiry."""

    # Model-free variance sigma^2
    variance: float

    # Implied volatility (annualized, %): sqrt(variance) * 100, 0 if not positive
    implied_vol: float

    # Forward price F and reference strike K0 (cents)
    forward: Cents
    k0: Cents

    # Time to expiry in years and in minutes
    T: float
    minutes: float

    # 2 * sum / T
    sum_term: float

    # (F/K0 - 1)^2 / T
    adjustment_term: float

    # Per-leg contributions (dollars) and the strikes/kinds they belong to
    strike_contributions: np.ndarray = field(default_factory=lambda: np.array([]))
    strikes: np.ndarray = field(default_factory=lambda: np.array([], dtype=np.int64))
    kinds: list = field(default_factory=list)

    # Paired strikes available for the expiry
    n_strikes: int = 0

    # Number of OTM puts (K < K0) and calls (K >= F) in the selection
    n_puts: int = 0
    n_calls: int = 0


@dataclass(frozen=True)
class ExpiryGroup:
    """All quotes for one expiration plus its risk-free rate."""

    expires_at: datetime
    calls: Sequence[OptionContract]
    puts: Sequence[OptionContract]
    risk_free_rate: float = DEFAULT_RISK_FREE_RATE
    drop_zero_bids: bool = DROP_ZERO_BIDS
    minutes_per_year: float = MINUTES_PER_YEAR

    def __post_init__(self):
        object.__setattr__(self, "calls", tuple(self.calls))
        object.__setattr__(self, "puts", tuple(self.puts))

    def strikes(self) -> list[OptionStrike]:
        """Paired strikes for this expiry, ascending, with delta_K."""
        return get_strikes(self.calls, self.puts, drop_zero_bids=self.drop_zero_bids)

    def minutes_to_expiration(self, now: datetime) -> float:
        """Whole minutes until expiry (negative once expired)."""
        seconds = (self.expires_at - now).total_seconds()
        return float(int(seconds / 60))

    def time_to_expiration(self, now: datetime) -> Percentage:
        """Time until expiry as a fraction of a 365-day year."""
        return self.minutes_to_expiration(now) / self.minutes_per_year

    def forward_details(self, now: datetime, strikes: Optional[list[OptionStrike]] = None) -> ForwardResult:
        """Compute the implied forward price with diagnostics.

        Args:
            now: Snapshot time
            strikes: Precomputed strikes (computed if None)

        Returns:
            ForwardResult; forward is 0 when no strike has both legs
        """
        if strikes is None:
            strikes = self.strikes()

        interest = float(np.exp(self.risk_free_rate * self.time_to_expiration(now)))

        if not strikes:
            return ForwardResult(
                forward=0,
                k_star=None,
                c_mid_at_k_star=None,
                p_mid_at_k_star=None,
                parity_diff=None,
                interest=interest,
                n_valid_strikes=0,
            )

        # ATM strike; ties resolve to the lowest strike
        atm = min(strikes, key=lambda s: abs(s.call_put_difference))
        forward = atm.price + int(interest * atm.call_put_difference)

        return ForwardResult(
            forward=forward,
            k_star=atm.price,
            c_mid_at_k_star=atm.call.mark,
            p_mid_at_k_star=atm.put.mark,
            parity_diff=abs(atm.call_put_difference),
            interest=interest,
            n_valid_strikes=len(strikes),
        )

    def forward_price(self, now: datetime) -> Cents:
        """Implied forward price in cents."""
        return self.forward_details(now).forward

    def variance_details(self, now: datetime) -> VarianceResult:
        """Compute model-free variance with a per-leg breakdown."""
        minutes = self.minutes_to_expiration(now)
        T = self.time_to_expiration(now)
        exp_rT = float(np.exp(self.risk_free_rate * T))

        strikes = self.strikes()
        F = self.forward_details(now, strikes=strikes).forward

        below = [s for s in strikes if s.price < F]
        above = [s for s in strikes if s.price >= F]

        # K0 is the highest strike strictly below F
        k = below[-1] if below else None
        k0 = k.price if k is not None else 0
        otm_puts = below[:-1]

        legs: list[tuple[OptionContract, Cents]] = []
        legs += [(s.put, s.delta_k) for s in otm_puts]
        legs += [(s.call, s.delta_k) for s in above]
        if k is not None:
            # K0 contributes both legs
            legs += [(k.call, k.delta_k), (k.put, k.delta_k)]

        strike_cents = np.array([c.strike for c, _ in legs], dtype=np.int64)
        strike_dollars = strike_cents.astype(np.float64) / 100.0
        delta_k = np.array([dk for _, dk in legs], dtype=np.float64) / 100.0
        quotes = np.array([c.mark for c, _ in legs], dtype=np.float64) / 100.0

        with np.errstate(divide="ignore", invalid="ignore"):
            contributions = delta_k / strike_dollars**2 * quotes * exp_rT
            total = float(np.sum(contributions))

            a = F / k0 - 1.0 if k0 != 0 else 0.0

            T64 = np.float64(T)
            variance = float(np.float64(2.0 * total - a * a) / T64)
            sum_term = float(np.float64(2.0 * total) / T64)
            adjustment_term = float(np.float64(a * a) / T64)

        implied_vol = float(np.sqrt(variance)) * 100 if np.isfinite(variance) and variance > 0 else 0.0

        return VarianceResult(
            variance=variance,
            implied_vol=implied_vol,
            forward=F,
            k0=k0,
            T=T,
            minutes=minutes,
            sum_term=sum_term,
            adjustment_term=adjustment_term,
            strike_contributions=contributions,
            strikes=strike_cents,
            kinds=[c.kind.value for c, _ in legs],
            n_strikes=len(strikes),
            n_puts=len(otm_puts),
            n_calls=len(above),
        )

    def variance(self, now: datetime) -> Percentage:
        """sigma^2 for this expiry (fractional, not %)."""
        return self.variance_details(now).variance
