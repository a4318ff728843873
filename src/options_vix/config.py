"""Project configuration, constants and paths.

Numeric constants used by the index computation live here so they can be
overridden per call (constructors default to them) or per environment
(via a ``.env`` file or process environment).
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# =============================================================================
# Project Paths
# =============================================================================

# Project root (options-vix/)
PROJECT_ROOT = Path(__file__).parent.parent.parent

# Data directories
DATA_DIR = PROJECT_ROOT / "data"
RAW_DATA_DIR = DATA_DIR / "raw"
PROCESSED_DATA_DIR = DATA_DIR / "processed"

# Reports
REPORTS_DIR = PROJECT_ROOT / "reports"
FIGURES_DIR = REPORTS_DIR / "figures"

# Default batch output
VIX_RESULTS_PARQUET = PROCESSED_DATA_DIR / "vix_results.parquet"


# =============================================================================
# Index Constants
# =============================================================================

MINUTES_PER_DAY = 24 * 60

# 365-day year in minutes (N_365)
MINUTES_PER_YEAR = 365 * MINUTES_PER_DAY

# Constant-maturity horizon in minutes (N_30)
TARGET_DAYS = 30
MINUTES_30_DAYS = TARGET_DAYS * MINUTES_PER_DAY

# Flat annualized risk-free rate applied to every expiry
DEFAULT_RISK_FREE_RATE = 0.003

# Exclude quotes with a zero bid before pairing strikes
DROP_ZERO_BIDS = True

# Minimum paired strikes per expiry for a snapshot to be reported
MIN_STRIKES = 3

# Hour of day (local to the snapshot clock) at which options expire
EXPIRY_HOUR = 16


# =============================================================================
# Runtime Configuration
# =============================================================================

@dataclass
class VixConfig:
    """Tunable parameters for a snapshot computation."""

    # Annualized risk-free rate as a fraction (0.003 = 0.3%)
    risk_free_rate: float = DEFAULT_RISK_FREE_RATE

    # Liquidity policy for strike aggregation
    drop_zero_bids: bool = DROP_ZERO_BIDS

    # Interpolation horizon in days
    target_days: int = TARGET_DAYS

    # Minimum paired strikes per expiry
    min_strikes: int = MIN_STRIKES

    # Expiries closer than this (in minutes) are not eligible
    min_minutes: int = 1

    @property
    def target_minutes(self) -> int:
        """Interpolation horizon in minutes."""
        return self.target_days * MINUTES_PER_DAY


_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def _parse_bool(name: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ValueError(f"Invalid boolean for {name}: {raw!r}")


def _parse_number(name: str, raw: str, cast):
    try:
        return cast(raw.strip())
    except ValueError:
        raise ValueError(f"Invalid value for {name}: {raw!r}") from None


def get_vix_config(env: Optional[dict] = None) -> VixConfig:
    """Build a VixConfig from environment overrides.

    Recognized variables:
        OPTIONS_VIX_RISK_FREE_RATE: float, e.g. "0.003"
        OPTIONS_VIX_DROP_ZERO_BIDS: boolean ("true"/"false")
        OPTIONS_VIX_TARGET_DAYS: int
        OPTIONS_VIX_MIN_STRIKES: int

    Args:
        env: Mapping to read from (defaults to os.environ)

    Returns:
        VixConfig with defaults replaced by any overrides present

    Raises:
        ValueError: If an override cannot be parsed or is out of range
    """
    if env is None:
        env = os.environ

    config = VixConfig()

    raw = env.get("OPTIONS_VIX_RISK_FREE_RATE")
    if raw:
        config.risk_free_rate = _parse_number("OPTIONS_VIX_RISK_FREE_RATE", raw, float)

    raw = env.get("OPTIONS_VIX_DROP_ZERO_BIDS")
    if raw:
        config.drop_zero_bids = _parse_bool("OPTIONS_VIX_DROP_ZERO_BIDS", raw)

    raw = env.get("OPTIONS_VIX_TARGET_DAYS")
    if raw:
        config.target_days = _parse_number("OPTIONS_VIX_TARGET_DAYS", raw, int)
        if config.target_days <= 0:
            raise ValueError(f"OPTIONS_VIX_TARGET_DAYS must be positive, got {config.target_days}")

    raw = env.get("OPTIONS_VIX_MIN_STRIKES")
    if raw:
        config.min_strikes = _parse_number("OPTIONS_VIX_MIN_STRIKES", raw, int)
        if config.min_strikes < 0:
            raise ValueError(f"OPTIONS_VIX_MIN_STRIKES must be >= 0, got {config.min_strikes}")

    return config


# =============================================================================
# Directory Management
# =============================================================================

def ensure_directories():
    """Create data and report directories."""
    for dir_path in [RAW_DATA_DIR, PROCESSED_DATA_DIR, REPORTS_DIR, FIGURES_DIR]:
        dir_path.mkdir(parents=True, exist_ok=True)
