"""Expiry selection for VIX computation.

Per VIX methodology, select two expirations bracketing 30 days:
- near term: latest expiry with time to expiry <= 30 days
- next term: earliest expiry with time to expiry > 30 days

Handles edge cases where standard bracketing isn't possible.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Mapping, Optional

from options_vix.config import MINUTES_30_DAYS
from options_vix.vix.expiry import ExpiryGroup


@dataclass
class ExpirySelection:
    """Result of expiry selection for VIX computation."""

    near_term: ExpiryGroup
    next_term: ExpiryGroup

    # Minutes to expiry at selection time
    near_minutes: float
    next_minutes: float

    # Whether this is a standard bracketing (near <= target < next)
    is_standard_bracket: bool

    # Warning/note about selection
    note: Optional[str] = None


class SelectionError(Exception):
    """Error during expiry selection."""

    def __init__(self, code: str, message: str):
        self.code = code
        self.message = message
        super().__init__(f"{code}: {message}")


def select_vix_expiries(
    groups: Mapping[datetime, ExpiryGroup],
    now: datetime,
    target_minutes: float = MINUTES_30_DAYS,
    min_minutes: float = 1,
) -> ExpirySelection:
    """Select near-term and next-term expirations for VIX computation.

    Edge cases:
    - Nothing <= target: use the two nearest above target
    - Nothing > target: use the two nearest below target
    - Fewer than two eligible expiries: raise SelectionError

    Args:
        groups: Mapping of expiration -> ExpiryGroup
        now: Snapshot time
        target_minutes: Constant maturity horizon (default 30 days)
        min_minutes: Minimum minutes to expiry to be eligible

    Returns:
        ExpirySelection with near and next expiries

    Raises:
        SelectionError: If unable to select two valid expirations
    """
    eligible = sorted(
        (
            (group.minutes_to_expiration(now), group)
            for group in groups.values()
        ),
        key=lambda item: item[0],
    )
    eligible = [(m, g) for m, g in eligible if m >= min_minutes]

    if len(eligible) == 0:
        raise SelectionError(
            "NO_VALID_EXPIRIES",
            f"No expirations at least {min_minutes} minutes out"
        )

    if len(eligible) == 1:
        raise SelectionError(
            "SINGLE_EXPIRY",
            f"Only one valid expiry found: {eligible[0][1].expires_at}"
        )

    near_candidates = [(m, g) for m, g in eligible if m <= target_minutes]
    next_candidates = [(m, g) for m, g in eligible if m > target_minutes]

    # Standard case: have both near and next
    if near_candidates and next_candidates:
        near_minutes, near_term = near_candidates[-1]
        next_minutes, next_term = next_candidates[0]
        return ExpirySelection(
            near_term=near_term,
            next_term=next_term,
            near_minutes=near_minutes,
            next_minutes=next_minutes,
            is_standard_bracket=True,
        )

    # Edge case: No near-term (everything beyond target)
    if not near_candidates:
        (near_minutes, near_term), (next_minutes, next_term) = eligible[:2]
        note = "Nothing within target; using two nearest above"
    # Edge case: No next-term (everything within target)
    else:
        (near_minutes, near_term), (next_minutes, next_term) = eligible[-2:]
        note = "Nothing beyond target; using two nearest below"

    return ExpirySelection(
        near_term=near_term,
        next_term=next_term,
        near_minutes=near_minutes,
        next_minutes=next_minutes,
        is_standard_bracket=False,
        note=note,
    )
