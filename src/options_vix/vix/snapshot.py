"""Single-snapshot VIX computation with full diagnostics.

Combines expiry grouping, expiry selection, variance computation and
interpolation into a single function. The core computations propagate
inf/nan for degenerate chains; this is where those are caught and
reported as skip reasons instead of index values.
"""

from collections import Counter
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Optional

import numpy as np

from options_vix.config import VixConfig, get_vix_config
from options_vix.vix.contracts import OptionContract
from options_vix.vix.expiry import ExpiryGroup, VarianceResult
from options_vix.vix.grouping import group_by_expiry
from options_vix.vix.interpolate import compute_vix_index, interpolate_30d_variance
from options_vix.vix.selection import SelectionError, select_vix_expiries


# Variance below zero but above this is treated as rounding noise
NEGATIVE_VARIANCE_TOLERANCE = -1e-8


@dataclass
class SnapshotVIXResult:
    """Result of a snapshot VIX computation with diagnostics."""

    # Core result
    now: datetime
    index: Optional[float] = None  # VIX-like index (100 * sqrt(var_30d))
    var_30d: Optional[float] = None

    # Expiry info
    near_exp: Optional[datetime] = None
    next_exp: Optional[datetime] = None
    near_minutes: Optional[float] = None
    next_minutes: Optional[float] = None
    is_standard_bracket: bool = True

    # Per-expiry variance
    sigma2_near: Optional[float] = None
    sigma2_next: Optional[float] = None
    iv_near: Optional[float] = None
    iv_next: Optional[float] = None

    # Forward prices and reference strikes (cents)
    forward_near: Optional[int] = None
    forward_next: Optional[int] = None
    k0_near: Optional[int] = None
    k0_next: Optional[int] = None

    # Strike counts
    n_strikes_near: Optional[int] = None
    n_strikes_next: Optional[int] = None

    # Strike carrying the largest share of each expiry's variance sum
    near_top_contrib_strike: Optional[int] = None
    near_top_contrib_frac: Optional[float] = None
    next_top_contrib_strike: Optional[int] = None
    next_top_contrib_frac: Optional[float] = None

    # Status
    success: bool = False
    skip_reason: Optional[str] = None
    warning: Optional[str] = None
    error_detail: Optional[str] = None


def _term_variance(
    result: SnapshotVIXResult,
    prefix: str,
    group: ExpiryGroup,
    now: datetime,
    min_strikes: int,
) -> Optional[VarianceResult]:
    """Compute and record one term's variance; None (with skip reason set) if unusable."""
    label = prefix.upper()
    var_result = group.variance_details(now)

    if var_result.n_strikes < min_strikes:
        result.skip_reason = f"TOO_FEW_STRIKES_{label}"
        result.error_detail = (
            f"{prefix.capitalize()} expiry has only {var_result.n_strikes} strikes (min: {min_strikes})"
        )
        return None

    if not np.isfinite(var_result.variance):
        result.skip_reason = f"NON_FINITE_VAR_{label}"
        result.error_detail = f"{prefix.capitalize()} variance is {var_result.variance}"
        return None

    if var_result.variance < 0:
        if var_result.variance < NEGATIVE_VARIANCE_TOLERANCE:
            result.skip_reason = f"NEGATIVE_VAR_{label}"
            result.error_detail = f"{prefix.capitalize()} variance < 0: {var_result.variance:.6f}"
            return None
        result.warning = (result.warning or "") + f" NEGATIVE_VAR_{label}({var_result.variance:.6f})"
        var_result.variance = 0.0

    setattr(result, f"sigma2_{prefix}", var_result.variance)
    setattr(result, f"iv_{prefix}", var_result.implied_vol)
    setattr(result, f"forward_{prefix}", var_result.forward)
    setattr(result, f"k0_{prefix}", var_result.k0)
    setattr(result, f"n_strikes_{prefix}", var_result.n_strikes)

    contrib = var_result.strike_contributions
    total = float(np.sum(contrib)) if contrib.size else 0.0
    if total > 0:
        top_idx = int(np.argmax(contrib))
        setattr(result, f"{prefix}_top_contrib_strike", int(var_result.strikes[top_idx]))
        setattr(result, f"{prefix}_top_contrib_frac", float(contrib[top_idx]) / total)

    return var_result


def compute_snapshot_vix(
    contracts: Iterable[OptionContract],
    now: datetime,
    config: Optional[VixConfig] = None,
) -> SnapshotVIXResult:
    """Compute a VIX-like index for one quote snapshot.

    Args:
        contracts: All quoted contracts in the snapshot
        now: Snapshot time
        config: Parameters (default: built from the environment)

    Returns:
        SnapshotVIXResult; success is False with a skip_reason when the
        chain cannot produce a finite index
    """
    if config is None:
        config = get_vix_config()

    result = SnapshotVIXResult(now=now)

    contracts = list(contracts)
    if not contracts:
        result.skip_reason = "NO_CONTRACTS"
        result.error_detail = "Snapshot has no contracts"
        return result

    groups = group_by_expiry(
        contracts,
        risk_free_rate=config.risk_free_rate,
        drop_zero_bids=config.drop_zero_bids,
    )

    # Step 1: Select expirations
    try:
        selection = select_vix_expiries(
            groups,
            now,
            target_minutes=config.target_minutes,
            min_minutes=config.min_minutes,
        )
    except SelectionError as e:
        result.skip_reason = e.code
        result.error_detail = e.message
        return result

    result.near_exp = selection.near_term.expires_at
    result.next_exp = selection.next_term.expires_at
    result.near_minutes = selection.near_minutes
    result.next_minutes = selection.next_minutes
    result.is_standard_bracket = selection.is_standard_bracket

    if selection.note:
        result.warning = selection.note

    # Step 2: Per-expiry variance
    var_near = _term_variance(result, "near", selection.near_term, now, config.min_strikes)
    if var_near is None:
        return result

    var_next = _term_variance(result, "next", selection.next_term, now, config.min_strikes)
    if var_next is None:
        return result

    # Step 3: Interpolate to constant maturity
    var_30d = interpolate_30d_variance(
        t_near=var_near.T,
        n_near=var_near.minutes,
        var_near=var_near.variance,
        t_next=var_next.T,
        n_next=var_next.minutes,
        var_next=var_next.variance,
        target_minutes=config.target_minutes,
        minutes_per_year=selection.near_term.minutes_per_year,
    )
    index = compute_vix_index(var_30d)

    if not np.isfinite(index):
        result.var_30d = var_30d
        result.skip_reason = "NON_FINITE_INDEX"
        result.error_detail = (
            f"Index is {index} (var_30d={var_30d}, "
            f"near={var_near.minutes:.0f}min, next={var_next.minutes:.0f}min)"
        )
        return result

    result.var_30d = var_30d
    result.index = index
    result.success = True
    return result


def result_to_dict(result: SnapshotVIXResult) -> dict:
    """Convert SnapshotVIXResult to a dictionary for DataFrame creation."""
    return {
        "now": result.now,
        "index": result.index,
        "var_30d": result.var_30d,
        "near_exp": result.near_exp,
        "next_exp": result.next_exp,
        "near_minutes": result.near_minutes,
        "next_minutes": result.next_minutes,
        "is_standard_bracket": result.is_standard_bracket,
        "sigma2_near": result.sigma2_near,
        "sigma2_next": result.sigma2_next,
        "iv_near": result.iv_near,
        "iv_next": result.iv_next,
        "forward_near": result.forward_near,
        "forward_next": result.forward_next,
        "k0_near": result.k0_near,
        "k0_next": result.k0_next,
        "n_strikes_near": result.n_strikes_near,
        "n_strikes_next": result.n_strikes_next,
        "near_top_contrib_strike": result.near_top_contrib_strike,
        "near_top_contrib_frac": result.near_top_contrib_frac,
        "next_top_contrib_strike": result.next_top_contrib_strike,
        "next_top_contrib_frac": result.next_top_contrib_frac,
        "success": result.success,
        "skip_reason": result.skip_reason,
        "warning": result.warning,
    }


def summarize_skip_reasons(results: list[SnapshotVIXResult]) -> dict[str, int]:
    """Count skip reasons across failed results."""
    return dict(Counter(r.skip_reason for r in results if not r.success and r.skip_reason))
