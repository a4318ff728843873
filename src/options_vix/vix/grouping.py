"""Partition a flat contract list into per-expiry chains."""

from datetime import datetime
from typing import Iterable, Optional

from options_vix.config import DEFAULT_RISK_FREE_RATE, DROP_ZERO_BIDS, MINUTES_PER_YEAR
from options_vix.vix.contracts import OptionContract
from options_vix.vix.expiry import ExpiryGroup


def group_by_expiry(
    contracts: Iterable[OptionContract],
    risk_free_rate: Optional[float] = None,
    drop_zero_bids: Optional[bool] = None,
    minutes_per_year: Optional[float] = None,
) -> dict[datetime, ExpiryGroup]:
    """Group contracts by expiration.

    Args:
        contracts: Contracts for any number of expirations, in any order
        risk_free_rate: Rate applied to every expiry (default: configured constant)
        drop_zero_bids: Liquidity policy for each group (default: configured constant)
        minutes_per_year: Annualization base for each group (default: 365 days)

    Returns:
        Mapping of expiration -> ExpiryGroup, ordered by ascending expiration
    """
    if risk_free_rate is None:
        risk_free_rate = DEFAULT_RISK_FREE_RATE
    if drop_zero_bids is None:
        drop_zero_bids = DROP_ZERO_BIDS
    if minutes_per_year is None:
        minutes_per_year = MINUTES_PER_YEAR

    buckets: dict[datetime, tuple[list, list]] = {}
    for contract in contracts:
        calls, puts = buckets.setdefault(contract.expires_at, ([], []))
        if contract.is_call:
            calls.append(contract)
        else:
            puts.append(contract)

    return {
        expires_at: ExpiryGroup(
            expires_at=expires_at,
            calls=calls,
            puts=puts,
            risk_free_rate=risk_free_rate,
            drop_zero_bids=drop_zero_bids,
            minutes_per_year=minutes_per_year,
        )
        for expires_at, (calls, puts) in sorted(buckets.items(), key=lambda item: item[0])
    }
