"""Plots of per-strike variance contributions.

Shows which part of the strike ladder drives an expiry's variance, which
is the first thing to check when an index value looks off.
"""

from pathlib import Path
from typing import Optional

import numpy as np
import matplotlib.pyplot as plt

from options_vix.vix.expiry import VarianceResult


# Style configuration
plt.style.use('seaborn-v0_8-whitegrid')
COLORS = {
    "put": "#A23B72",   # Magenta
    "call": "#2E86AB",  # Blue
    "k0": "#F18F01",    # Orange
    "forward": "#C73E1D",  # Red
}


def plot_strike_contributions(
    result: VarianceResult,
    title: Optional[str] = None,
    save_path: Optional[Path] = None,
    figsize: tuple = (12, 5),
) -> plt.Figure:
    """Bar chart of variance contributions by strike, colored by option kind.

    Args:
        result: Variance breakdown from ExpiryGroup.variance_details
        title: Plot title (default summarizes sigma^2 and IV)
        save_path: If provided, save figure to this path
        figsize: Figure size

    Returns:
        matplotlib Figure
    """
    fig, ax = plt.subplots(figsize=figsize)

    strikes = result.strikes.astype(np.float64) / 100.0
    contrib = result.strike_contributions
    kinds = np.array(result.kinds)

    unique = np.unique(strikes)
    width = 0.8 * float(np.min(np.diff(unique))) if unique.size > 1 else 1.0

    for kind in ("put", "call"):
        mask = kinds == kind
        if mask.any():
            ax.bar(strikes[mask], contrib[mask], width=width, color=COLORS[kind],
                   alpha=0.7, label=f"{kind}s")

    if result.k0:
        ax.axvline(result.k0 / 100.0, color=COLORS["k0"], linestyle="--",
                   linewidth=1.2, label=f"K0 = {result.k0 / 100:.2f}")
    if result.forward:
        ax.axvline(result.forward / 100.0, color=COLORS["forward"], linestyle=":",
                   linewidth=1.2, label=f"F = {result.forward / 100:.2f}")

    ax.set_xlabel("Strike", fontsize=12)
    ax.set_ylabel("Contribution (ΔK/K² · e^rT · Q)", fontsize=12)
    if title is None:
        title = f"Strike contributions: σ² = {result.variance:.6f}, IV = {result.implied_vol:.2f}%"
    ax.set_title(title, fontsize=14, fontweight="bold")
    ax.legend(loc="upper right", fontsize=10)

    plt.tight_layout()

    if save_path:
        fig.savefig(save_path, dpi=150, bbox_inches="tight")
        print(f"  Saved: {save_path}")

    return fig
