"""Tests for diagnostics and plotting."""

import matplotlib.pyplot as plt

from options_vix.vix.expiry import ExpiryGroup
from options_vix.vix.qc import (
    contributions_to_frame,
    print_variance_diagnostics,
    strikes_to_frame,
)


class TestDiagnosticsTables:
    """Tests for polars diagnostics tables."""

    def test_strikes_to_frame(self, near_chain, near_expiry):
        """Test the strike ladder table."""
        df = strikes_to_frame(ExpiryGroup(near_expiry, *near_chain).strikes())

        assert df.columns == ["strike", "call_mark", "put_mark", "call_put_diff", "mark", "delta_k"]
        assert df["strike"].to_list() == [9000, 9500, 10000, 10500, 11000]
        assert df["delta_k"].to_list() == [0, 500, 500, 500, 0]
        assert df.filter(df["strike"] == 10000)["call_put_diff"].item() == 0

    def test_strikes_to_frame_empty(self):
        """Test an empty ladder keeps its schema."""
        df = strikes_to_frame([])
        assert len(df) == 0
        assert "delta_k" in df.columns

    def test_contributions_to_frame(self, near_chain, near_expiry, now):
        """Test per-leg contributions, with K0 listed twice."""
        result = ExpiryGroup(near_expiry, *near_chain).variance_details(now)
        df = contributions_to_frame(result)

        assert len(df) == 6
        assert df["strike"].to_list() == sorted(df["strike"].to_list())
        assert df.filter(df["strike"] == 9500)["kind"].sort().to_list() == ["call", "put"]


class TestDiagnosticsOutput:
    """Tests for printed diagnostics and plots."""

    def test_print_variance_diagnostics(self, near_chain, near_expiry, now, capsys):
        """Test the printed report."""
        result = ExpiryGroup(near_expiry, *near_chain).variance_details(now)
        print_variance_diagnostics(result, expires_at=near_expiry)

        out = capsys.readouterr().out
        assert "VARIANCE DIAGNOSTICS - Expiry" in out
        assert "ATM Strike (K0):    95.00" in out
        assert "Top 5 Strike Contributions" in out

    def test_print_diagnostics_empty_chain(self, near_expiry, now, capsys):
        """Test the report for a chain with no strikes."""
        result = ExpiryGroup(near_expiry, [], []).variance_details(now)
        print_variance_diagnostics(result)

        out = capsys.readouterr().out
        assert "Paired strikes:     0" in out
        assert "Top 5" not in out

    def test_plot_strike_contributions(self, near_chain, near_expiry, now, tmp_path):
        """Test the contribution plot is produced and saved."""
        from options_vix.viz import plot_strike_contributions

        result = ExpiryGroup(near_expiry, *near_chain).variance_details(now)
        save_path = tmp_path / "contrib.png"
        fig = plot_strike_contributions(result, save_path=save_path)

        assert save_path.exists()
        assert len(fig.axes[0].patches) == 6
        plt.close(fig)
