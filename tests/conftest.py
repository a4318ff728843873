"""Pytest configuration and fixtures.

Chains are synthetic: strikes 90..110 around a forward of 100, with call
and put time values symmetric about the money so put-call parity holds
exactly at the 100 strike.
"""

import pytest
from datetime import datetime, timedelta

import matplotlib

matplotlib.use("Agg")

from options_vix.vix.contracts import OptionContract, OptionKind


# Spread (cents) applied either side of the mark
HALF_SPREAD = 5

STRIKES_DOLLARS = [90, 95, 100, 105, 110]

# Time value (cents) by |K - F| in dollars
NEAR_TIME_VALUE = {0: 300, 5: 120, 10: 40}
NEXT_TIME_VALUE = {0: 600, 5: 400, 10: 250}


def make_contract(expires_at, strike, kind, mark, half_spread=HALF_SPREAD):
    """Contract quoted symmetrically around `mark` (all in cents)."""
    return OptionContract(
        expires_at=expires_at,
        strike=strike,
        kind=kind,
        bid=mark - half_spread,
        ask=mark + half_spread,
    )


def build_chain(expires_at, time_value, forward=100, strikes=STRIKES_DOLLARS):
    """Calls and puts for a symmetric chain around `forward` (dollars)."""
    calls, puts = [], []
    for k in strikes:
        tv = time_value[abs(k - forward)]
        calls.append(make_contract(expires_at, k * 100, OptionKind.CALL, max(forward - k, 0) * 100 + tv))
        puts.append(make_contract(expires_at, k * 100, OptionKind.PUT, max(k - forward, 0) * 100 + tv))
    return calls, puts


@pytest.fixture
def now():
    """Snapshot time."""
    return datetime(2009, 1, 1)


@pytest.fixture
def near_expiry(now):
    """Near-term expiry: 10 days out at 16:00 (15360 minutes)."""
    return (now + timedelta(days=10)).replace(hour=16)


@pytest.fixture
def next_expiry(now):
    """Next-term expiry: 40 days out at 16:00 (58560 minutes)."""
    return (now + timedelta(days=40)).replace(hour=16)


@pytest.fixture
def near_chain(near_expiry):
    """(calls, puts) for the near-term expiry."""
    return build_chain(near_expiry, NEAR_TIME_VALUE)


@pytest.fixture
def next_chain(next_expiry):
    """(calls, puts) for the next-term expiry."""
    return build_chain(next_expiry, NEXT_TIME_VALUE)


@pytest.fixture
def snapshot_contracts(near_chain, next_chain):
    """Flat contract list for both expiries, interleaved by expiry."""
    contracts = []
    for chain in (near_chain, next_chain):
        calls, puts = chain
        for call, put in zip(calls, puts):
            contracts.extend([call, put])
    return contracts


@pytest.fixture
def quote_csv(tmp_path, now):
    """Write a two-expiry quote CSV in dollars and return its path."""
    rows = ["expiration,days,strike,call_bid,call_ask,put_bid,put_ask"]
    for days, time_value in ((10, NEAR_TIME_VALUE), (40, NEXT_TIME_VALUE)):
        expiration = (now + timedelta(days=days)).date().isoformat()
        for k in STRIKES_DOLLARS:
            tv = time_value[abs(k - 100)]
            c_mark = max(100 - k, 0) * 100 + tv
            p_mark = max(k - 100, 0) * 100 + tv
            rows.append(
                f"{expiration},{days},{k}.00,"
                f"{(c_mark - HALF_SPREAD) / 100:.2f},{(c_mark + HALF_SPREAD) / 100:.2f},"
                f"{(p_mark - HALF_SPREAD) / 100:.2f},{(p_mark + HALF_SPREAD) / 100:.2f}"
            )
    path = tmp_path / "options.csv"
    path.write_text("\n".join(rows) + "\n")
    return path
