"""Options quote CSV loading.

The CSV is wide: each row holds the call and put quotes for one
expiration / strike. Expirations are given as an offset in days from the
snapshot time. Prices are decimal strings and are converted to integer
cents on load.

Expected columns (extra columns are ignored):
    days, strike, call_bid, call_ask, put_bid, put_ask

An `expiration` date column is often present alongside `days`; it is not
read, the expiration always comes from `days`.
"""

from datetime import datetime, timedelta
from pathlib import Path
from typing import Union

import polars as pl

from options_vix.config import EXPIRY_HOUR
from options_vix.vix.contracts import Cents, OptionContract, OptionKind


# =============================================================================
# Column names
# =============================================================================

class Cols:
    """Column names in the quote CSV."""

    DAYS = "days"
    STRIKE = "strike"

    # Call data
    CALL_BID = "call_bid"
    CALL_ASK = "call_ask"

    # Put data
    PUT_BID = "put_bid"
    PUT_ASK = "put_ask"


PRICE_COLUMNS = [
    Cols.STRIKE,
    Cols.CALL_BID,
    Cols.CALL_ASK,
    Cols.PUT_BID,
    Cols.PUT_ASK,
]

REQUIRED_COLUMNS = [Cols.DAYS, *PRICE_COLUMNS]


# =============================================================================
# Conversion helpers
# =============================================================================

def to_cents(value: Union[str, float]) -> Cents:
    """Convert a decimal currency amount to integer cents, rounding to nearest.

    Scalar form of the column conversion used by `scan_options_csv`.
    """
    return round(float(value) * 100)


def _cents_expr(col_name: str) -> pl.Expr:
    # strict cast: a malformed price fails the load
    return (
        (pl.col(col_name).str.strip_chars().cast(pl.Float64, strict=True) * 100)
        .round(0)
        .cast(pl.Int64)
        .alias(col_name)
    )


# =============================================================================
# Loading functions
# =============================================================================

def scan_options_csv(csv_path: Path) -> pl.LazyFrame:
    """Scan a quote CSV lazily, with prices converted to integer cents.

    Args:
        csv_path: Path to the CSV file

    Returns:
        LazyFrame with columns days (Int64) and strike/bid/ask (Int64 cents)

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If required columns are missing
    """
    csv_path = Path(csv_path)
    if not csv_path.exists():
        raise FileNotFoundError(f"Quote file not found: {csv_path}")

    # Read everything as strings; parsing is explicit below
    lf = pl.scan_csv(csv_path, infer_schema_length=0)

    columns = lf.collect_schema().names()
    missing = [c for c in REQUIRED_COLUMNS if c not in columns]
    if missing:
        raise ValueError(f"Quote file {csv_path} missing columns: {missing}")

    return lf.select([
        pl.col(Cols.DAYS).str.strip_chars().cast(pl.Int64, strict=True).alias(Cols.DAYS),
        *[_cents_expr(c) for c in PRICE_COLUMNS],
    ])


def load_options_csv(csv_path: Path) -> pl.DataFrame:
    """Load a quote CSV into memory (see scan_options_csv)."""
    return scan_options_csv(csv_path).collect()


def expiration_for(now: datetime, days: int, expiry_hour: int = EXPIRY_HOUR) -> datetime:
    """Expiration timestamp: `days` after `now`, at `expiry_hour` o'clock."""
    return (now + timedelta(days=days)).replace(hour=expiry_hour)


def frame_to_contracts(
    df: pl.DataFrame,
    now: datetime,
    expiry_hour: int = EXPIRY_HOUR,
) -> list[OptionContract]:
    """Build one call and one put contract per quote row.

    Args:
        df: Frame from load_options_csv
        now: Snapshot time the day offsets are relative to
        expiry_hour: Hour of day options expire

    Returns:
        Contracts in row order (call then put for each row)
    """
    contracts = []
    for row in df.iter_rows(named=True):
        expires_at = expiration_for(now, row[Cols.DAYS], expiry_hour)
        strike = row[Cols.STRIKE]
        contracts.append(OptionContract(
            expires_at=expires_at,
            strike=strike,
            kind=OptionKind.CALL,
            bid=row[Cols.CALL_BID],
            ask=row[Cols.CALL_ASK],
        ))
        contracts.append(OptionContract(
            expires_at=expires_at,
            strike=strike,
            kind=OptionKind.PUT,
            bid=row[Cols.PUT_BID],
            ask=row[Cols.PUT_ASK],
        ))
    return contracts


def load_contracts(
    csv_path: Path,
    now: datetime,
    expiry_hour: int = EXPIRY_HOUR,
) -> list[OptionContract]:
    """Load a quote CSV straight into contracts."""
    return frame_to_contracts(load_options_csv(csv_path), now, expiry_hour=expiry_hour)
