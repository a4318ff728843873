"""Diagnostics for strike ladders and variance computations."""

from datetime import datetime
from typing import Optional

import numpy as np
import polars as pl

from options_vix.vix.expiry import VarianceResult
from options_vix.vix.strikes import OptionStrike


def strikes_to_frame(strikes: list[OptionStrike]) -> pl.DataFrame:
    """Tabulate paired strikes (all prices in cents).

    Columns: strike, call_mark, put_mark, call_put_diff, mark, delta_k
    """
    return pl.DataFrame(
        {
            "strike": [s.price for s in strikes],
            "call_mark": [s.call.mark for s in strikes],
            "put_mark": [s.put.mark for s in strikes],
            "call_put_diff": [s.call_put_difference for s in strikes],
            "mark": [s.mark for s in strikes],
            "delta_k": [s.delta_k for s in strikes],
        },
        schema={
            "strike": pl.Int64,
            "call_mark": pl.Int64,
            "put_mark": pl.Int64,
            "call_put_diff": pl.Int64,
            "mark": pl.Int64,
            "delta_k": pl.Int64,
        },
    )


def contributions_to_frame(result: VarianceResult) -> pl.DataFrame:
    """Tabulate per-leg variance contributions, ascending by strike."""
    return pl.DataFrame(
        {
            "strike": result.strikes.tolist(),
            "kind": list(result.kinds),
            "contribution": result.strike_contributions.tolist(),
        },
        schema={"strike": pl.Int64, "kind": pl.Utf8, "contribution": pl.Float64},
    ).sort("strike", maintain_order=True)


def print_variance_diagnostics(result: VarianceResult, expires_at: Optional[datetime] = None):
    """Print diagnostic information for a variance computation."""
    print("=" * 60)
    if expires_at:
        print(f"VARIANCE DIAGNOSTICS - Expiry: {expires_at}")
    else:
        print("VARIANCE DIAGNOSTICS")
    print("=" * 60)

    print(f"\n[Forward & ATM]")
    print(f"  Forward (F):        {result.forward / 100:.2f}")
    print(f"  ATM Strike (K0):    {result.k0 / 100:.2f}")
    if result.k0:
        print(f"  F/K0 - 1:           {(result.forward / result.k0 - 1)*100:.4f}%")

    print(f"\n[Time to Expiry]")
    print(f"  Minutes:            {result.minutes:.0f}")
    print(f"  T (years):          {result.T:.6f}")

    print(f"\n[Strike Coverage]")
    print(f"  Paired strikes:     {result.n_strikes}")
    print(f"  OTM puts (K < K0):  {result.n_puts}")
    print(f"  OTM calls (K >= F): {result.n_calls}")
    if result.strikes.size:
        print(f"  Strike range:       [{result.strikes.min() / 100:.2f}, {result.strikes.max() / 100:.2f}]")

    print(f"\n[Variance Computation]")
    print(f"  Sum term:           {result.sum_term:.6f}")
    print(f"  Adjustment term:    {result.adjustment_term:.6f}")
    print(f"  Variance (sigma²):  {result.variance:.6f}")
    print(f"  Implied Vol:        {result.implied_vol:.2f}%")

    if result.strike_contributions.size:
        print(f"\n[Top 5 Strike Contributions]")
        top_idx = np.argsort(result.strike_contributions)[::-1][:5]
        for i, idx in enumerate(top_idx):
            print(
                f"  {i+1}. K={result.strikes[idx] / 100:.2f} ({result.kinds[idx]}): "
                f"{result.strike_contributions[idx]:.6f}"
            )

    print("=" * 60)
