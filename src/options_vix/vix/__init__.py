"""VIX computation modules.

Core modules:
- contracts: Quoted option contracts
- strikes: Call/put pairing by strike and delta_K
- expiry: Per-expiry forward price and model-free variance
- grouping: Split contracts into per-expiry chains
- selection: Near/next expiry selection
- interpolate: 30-day constant maturity interpolation
- snapshot: Single-snapshot VIX computation
- qc: Diagnostics
"""

from options_vix.vix.contracts import (
    Cents,
    OptionContract,
    OptionKind,
    Percentage,
)

from options_vix.vix.strikes import (
    OptionStrike,
    get_strikes,
)

from options_vix.vix.expiry import (
    ExpiryGroup,
    ForwardResult,
    VarianceResult,
)

from options_vix.vix.grouping import (
    group_by_expiry,
)

from options_vix.vix.selection import (
    ExpirySelection,
    SelectionError,
    select_vix_expiries,
)

from options_vix.vix.interpolate import (
    interpolate_30d_variance,
    compute_vix_index,
    compute_vix,
)

from options_vix.vix.snapshot import (
    SnapshotVIXResult,
    compute_snapshot_vix,
    result_to_dict,
    summarize_skip_reasons,
)

from options_vix.vix.qc import (
    strikes_to_frame,
    contributions_to_frame,
    print_variance_diagnostics,
)

__all__ = [
    # Contracts
    "Cents",
    "OptionContract",
    "OptionKind",
    "Percentage",
    # Strikes
    "OptionStrike",
    "get_strikes",
    # Expiry
    "ExpiryGroup",
    "ForwardResult",
    "VarianceResult",
    # Grouping
    "group_by_expiry",
    # Selection
    "ExpirySelection",
    "SelectionError",
    "select_vix_expiries",
    # Interpolation
    "interpolate_30d_variance",
    "compute_vix_index",
    "compute_vix",
    # Snapshot
    "SnapshotVIXResult",
    "compute_snapshot_vix",
    "result_to_dict",
    "summarize_skip_reasons",
    # QC
    "strikes_to_frame",
    "contributions_to_frame",
    "print_variance_diagnostics",
]
