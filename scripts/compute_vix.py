#!/usr/bin/env python3
"""Compute the VIX-like index for one or more quote snapshots.

Each CSV is one snapshot: rows of (days, strike, call_bid, call_ask,
put_bid, put_ask) with expirations given as day offsets from --now.

Usage:
    uv run python scripts/compute_vix.py --csv data/raw/options.csv
    uv run python scripts/compute_vix.py --csv a.csv --csv b.csv --output data/processed/vix.parquet
    uv run python scripts/compute_vix.py --csv data/raw/options.csv --diagnostics --plot
"""

import argparse
import sys
from datetime import datetime
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import polars as pl
from tqdm import tqdm

from options_vix.config import FIGURES_DIR, ensure_directories, get_vix_config
from options_vix.io import load_contracts
from options_vix.vix import (
    SnapshotVIXResult,
    compute_snapshot_vix,
    group_by_expiry,
    print_variance_diagnostics,
    result_to_dict,
    summarize_skip_reasons,
)


DEFAULT_NOW = "2009-01-01T00:00:00"


def show_diagnostics(contracts, result: SnapshotVIXResult, config, plot: bool = False):
    """Print variance breakdowns (and optionally plots) for the selected expiries."""
    groups = group_by_expiry(
        contracts,
        risk_free_rate=config.risk_free_rate,
        drop_zero_bids=config.drop_zero_bids,
    )
    for label, expires_at in (("near", result.near_exp), ("next", result.next_exp)):
        if expires_at is None:
            continue
        var_result = groups[expires_at].variance_details(result.now)
        print_variance_diagnostics(var_result, expires_at=expires_at)

        if plot:
            from options_vix.viz import plot_strike_contributions

            ensure_directories()
            save_path = FIGURES_DIR / f"contributions_{label}_{expires_at:%Y%m%d}.png"
            plot_strike_contributions(var_result, save_path=save_path)


def run_pipeline(
    csv_paths: list[Path],
    now: datetime,
    config,
    diagnostics: bool = False,
    plot: bool = False,
    verbose: bool = False,
) -> tuple[list[SnapshotVIXResult], dict]:
    """Compute the index for each snapshot file.

    Returns:
        (results, stats)
    """
    results = []

    for csv_path in tqdm(csv_paths, desc="Computing VIX"):
        try:
            contracts = load_contracts(csv_path, now)
        except (OSError, ValueError, pl.exceptions.PolarsError) as e:
            print(f"ERROR loading {csv_path}: {e}")
            results.append(SnapshotVIXResult(
                now=now,
                skip_reason="LOAD_ERROR",
                error_detail=str(e),
            ))
            continue

        result = compute_snapshot_vix(contracts, now, config=config)
        results.append(result)

        if verbose and not result.success:
            print(f"  {csv_path}: SKIP - {result.skip_reason} ({result.error_detail})")

        if diagnostics:
            show_diagnostics(contracts, result, config, plot=plot)

    n_success = sum(1 for r in results if r.success)
    stats = {
        "total": len(results),
        "successful": n_success,
        "failed": len(results) - n_success,
        "success_rate": 100.0 * n_success / len(results) if results else 0,
        "skip_reasons": summarize_skip_reasons(results),
    }

    indices = [r.index for r in results if r.success]
    if indices:
        stats["index_min"] = min(indices)
        stats["index_max"] = max(indices)
        stats["index_mean"] = sum(indices) / len(indices)

    return results, stats


def print_summary(stats: dict, results: list[SnapshotVIXResult], csv_paths: list[Path]):
    """Print pipeline summary statistics."""
    print("\n" + "=" * 60)
    print("VIX SUMMARY")
    print("=" * 60)

    print(f"\n[Snapshots]")
    for path, result in zip(csv_paths, results):
        if result.success:
            print(f"  {path}: {result.index:.4f}")
        else:
            print(f"  {path}: SKIP ({result.skip_reason})")

    print(f"\n[Processing Stats]")
    print(f"  Total:          {stats['total']}")
    print(f"  Successful:     {stats['successful']}")
    print(f"  Failed/Skipped: {stats['failed']}")
    print(f"  Success rate:   {stats['success_rate']:.1f}%")

    if stats.get('skip_reasons'):
        print(f"\n[Skip Reasons]")
        for reason, count in sorted(stats['skip_reasons'].items(), key=lambda x: -x[1]):
            print(f"  {reason}: {count}")

    if stats.get('index_mean'):
        print(f"\n[Index Statistics]")
        print(f"  Min:  {stats['index_min']:.2f}")
        print(f"  Max:  {stats['index_max']:.2f}")
        print(f"  Mean: {stats['index_mean']:.2f}")

    print("=" * 60)


def main():
    parser = argparse.ArgumentParser(
        description="Compute VIX-like index from option quote snapshots"
    )
    parser.add_argument("--csv", type=Path, action="append", required=True,
                        help="Quote CSV (repeatable)")
    parser.add_argument("--now", type=str, default=DEFAULT_NOW,
                        help=f"Snapshot time, ISO format (default {DEFAULT_NOW})")
    parser.add_argument("--rate", type=float, help="Risk-free rate override (e.g. 0.003)")
    parser.add_argument("--keep-zero-bids", action="store_true",
                        help="Do not drop zero-bid quotes before pairing strikes")
    parser.add_argument("--output", type=Path, help="Write results to this parquet file")
    parser.add_argument("--diagnostics", action="store_true",
                        help="Print variance breakdown for selected expiries")
    parser.add_argument("--plot", action="store_true",
                        help="With --diagnostics, save contribution plots")
    parser.add_argument("--verbose", "-v", action="store_true", help="Verbose output")
    args = parser.parse_args()

    try:
        config = get_vix_config()
    except ValueError as e:
        print(f"ERROR: {e}")
        sys.exit(1)

    if args.rate is not None:
        config.risk_free_rate = args.rate
    if args.keep_zero_bids:
        config.drop_zero_bids = False

    now = datetime.fromisoformat(args.now)

    results, stats = run_pipeline(
        args.csv,
        now,
        config,
        diagnostics=args.diagnostics,
        plot=args.plot,
        verbose=args.verbose,
    )
    print_summary(stats, results, args.csv)

    if args.output:
        args.output.parent.mkdir(parents=True, exist_ok=True)
        results_df = pl.DataFrame([result_to_dict(r) for r in results], infer_schema_length=None)
        print(f"\nSaving results to {args.output}")
        results_df.write_parquet(args.output)

    if stats['successful'] == 0:
        print("\nWARNING: No snapshot produced an index!")
        sys.exit(1)


if __name__ == "__main__":
    main()
