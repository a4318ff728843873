"""Strike aggregation: pair calls and puts by strike and assign delta_K.

Per VIX methodology:
1. Keep only strikes quoted on both sides (call and put)
2. Order strikes ascending
3. delta_K for interior strikes is half the distance between the
   neighboring strikes: (K_{i+1} - K_{i-1}) / 2
4. The lowest and highest strikes get delta_K = 0
"""

from dataclasses import dataclass, replace
from itertools import groupby
from typing import Iterable, Optional

from options_vix.config import DROP_ZERO_BIDS
from options_vix.vix.contracts import Cents, OptionContract


@dataclass(frozen=True)
class OptionStrike:
    """A call and a put sharing one strike and expiry."""

    # Strike price (cents)
    price: Cents

    call: OptionContract
    put: OptionContract

    # Half the interval between neighboring strikes (cents)
    delta_k: Cents = 0

    @property
    def call_put_difference(self) -> Cents:
        """Call mark minus put mark."""
        return self.call.mark - self.put.mark

    @property
    def mark(self) -> Cents:
        """Midpoint of the call and put marks."""
        return (self.call.mark + self.put.mark) // 2


def _pair_strike(price: Cents, contracts: Iterable[OptionContract]) -> Optional[OptionStrike]:
    """Pair the first call and first put at a strike, or None if one side is missing."""
    call = None
    put = None
    for contract in contracts:
        if call is None and contract.is_call:
            call = contract
        elif put is None and contract.is_put:
            put = contract
    if call is None or put is None:
        return None
    return OptionStrike(price=price, call=call, put=put)


def _compute_delta_k(strikes: list[OptionStrike]) -> list[OptionStrike]:
    """Return new strikes with delta_K filled from a 3-wide sliding window."""
    delta_ks: dict[Cents, Cents] = {}
    for prev, curr, nxt in zip(strikes, strikes[1:], strikes[2:]):
        delta_ks[curr.price] = (nxt.price - prev.price) // 2

    return [replace(s, delta_k=delta_ks.get(s.price, 0)) for s in strikes]


def get_strikes(
    calls: Iterable[OptionContract],
    puts: Iterable[OptionContract],
    drop_zero_bids: bool = DROP_ZERO_BIDS,
) -> list[OptionStrike]:
    """Build the sorted, paired, interval-weighted strikes for one expiry.

    Args:
        calls: Call contracts for the expiry
        puts: Put contracts for the expiry
        drop_zero_bids: Exclude quotes with a zero bid before pairing

    Returns:
        OptionStrike list, ascending by price, one entry per strike that
        has both a call and a put
    """
    contracts = [*calls, *puts]
    if drop_zero_bids:
        contracts = [c for c in contracts if c.bid != 0]

    # Stable sort keeps arrival order within a strike
    contracts.sort(key=lambda c: c.strike)

    paired = []
    for price, group in groupby(contracts, key=lambda c: c.strike):
        strike = _pair_strike(price, group)
        if strike is not None:
            paired.append(strike)

    return _compute_delta_k(paired)
