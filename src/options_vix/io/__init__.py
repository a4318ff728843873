"""IO modules for data loading.

- options_loader: Quote CSV loading and conversion to contracts
"""

from options_vix.io.options_loader import (
    Cols,
    to_cents,
    scan_options_csv,
    load_options_csv,
    expiration_for,
    frame_to_contracts,
    load_contracts,
)

__all__ = [
    "Cols",
    "to_cents",
    "scan_options_csv",
    "load_options_csv",
    "expiration_for",
    "frame_to_contracts",
    "load_contracts",
]
