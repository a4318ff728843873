"""Visualization modules.

- contributions: Per-strike variance contribution plots
"""

from options_vix.viz.contributions import (
    plot_strike_contributions,
)

__all__ = [
    "plot_strike_contributions",
]
