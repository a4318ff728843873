"""Tests for expiry grouping, selection and 30-day interpolation."""

import math
from datetime import timedelta

import numpy as np
import pytest

from options_vix.vix.contracts import OptionKind

from conftest import build_chain, NEAR_TIME_VALUE, NEXT_TIME_VALUE


class TestGrouping:
    """Tests for splitting contracts by expiry."""

    def test_one_group_per_expiry(self, snapshot_contracts, near_expiry, next_expiry):
        """Test that each expiry gets its own group, ordered by date."""
        from options_vix.vix.grouping import group_by_expiry

        groups = group_by_expiry(reversed(snapshot_contracts))

        assert list(groups) == [near_expiry, next_expiry]
        near = groups[near_expiry]
        assert len(near.calls) == 5
        assert len(near.puts) == 5
        assert all(c.kind is OptionKind.CALL for c in near.calls)
        assert all(p.kind is OptionKind.PUT for p in near.puts)

    def test_non_contiguous_expiries_merge(self, near_chain, next_chain, near_expiry):
        """Test that interleaved expiries are not split into partial groups."""
        from options_vix.vix.grouping import group_by_expiry

        contracts = near_chain[0] + next_chain[0] + near_chain[1] + next_chain[1]
        groups = group_by_expiry(contracts)

        assert len(groups) == 2
        assert len(groups[near_expiry].calls) == 5
        assert len(groups[near_expiry].puts) == 5

    def test_default_and_override_rate(self, snapshot_contracts):
        """Test the fixed risk-free rate and its override."""
        from options_vix.vix.grouping import group_by_expiry

        default = group_by_expiry(snapshot_contracts)
        assert all(g.risk_free_rate == 0.003 for g in default.values())

        override = group_by_expiry(snapshot_contracts, risk_free_rate=0.01, drop_zero_bids=False)
        assert all(g.risk_free_rate == 0.01 for g in override.values())
        assert all(g.drop_zero_bids is False for g in override.values())

    def test_minutes_per_year_override(self, snapshot_contracts):
        """Test that every group carries the annualization base it was given."""
        from options_vix.vix.grouping import group_by_expiry

        assert all(g.minutes_per_year == 525600 for g in group_by_expiry(snapshot_contracts).values())

        groups = group_by_expiry(snapshot_contracts, minutes_per_year=360 * 1440)
        assert all(g.minutes_per_year == 518400 for g in groups.values())

    def test_empty_input(self):
        """Test that no contracts gives no groups."""
        from options_vix.vix.grouping import group_by_expiry

        assert group_by_expiry([]) == {}


class TestSelection:
    """Tests for near/next expiry selection."""

    def _groups(self, now, days_list):
        from options_vix.vix.grouping import group_by_expiry

        contracts = []
        for days in days_list:
            expires_at = (now + timedelta(days=days)).replace(hour=16)
            calls, puts = build_chain(expires_at, NEAR_TIME_VALUE)
            contracts += calls + puts
        return group_by_expiry(contracts)

    def test_standard_bracket(self, now):
        """Test near <= 30 days < next."""
        from options_vix.vix.selection import select_vix_expiries

        selection = select_vix_expiries(self._groups(now, [3, 10, 40, 70]), now)

        assert selection.is_standard_bracket
        assert selection.near_term.expires_at.day == 11
        assert selection.next_minutes == 40 * 1440 + 960
        assert selection.note is None

    def test_all_beyond_target(self, now):
        """Test the two nearest are used when nothing is within 30 days."""
        from options_vix.vix.selection import select_vix_expiries

        selection = select_vix_expiries(self._groups(now, [70, 40, 100]), now)

        assert not selection.is_standard_bracket
        assert selection.near_minutes == 40 * 1440 + 960
        assert selection.next_minutes == 70 * 1440 + 960
        assert selection.note

    def test_all_within_target(self, now):
        """Test the two latest are used when nothing is beyond 30 days."""
        from options_vix.vix.selection import select_vix_expiries

        selection = select_vix_expiries(self._groups(now, [3, 10, 20]), now)

        assert not selection.is_standard_bracket
        assert selection.near_minutes < selection.next_minutes
        assert selection.next_minutes == 20 * 1440 + 960

    def test_expired_groups_ignored(self, now):
        """Test that expiries in the past are not eligible."""
        from options_vix.vix.selection import SelectionError, select_vix_expiries

        with pytest.raises(SelectionError) as exc_info:
            select_vix_expiries(self._groups(now, [-5, 10]), now)
        assert exc_info.value.code == "SINGLE_EXPIRY"

    def test_no_expiries(self, now):
        """Test selection on an empty mapping."""
        from options_vix.vix.selection import SelectionError, select_vix_expiries

        with pytest.raises(SelectionError) as exc_info:
            select_vix_expiries({}, now)
        assert exc_info.value.code == "NO_VALID_EXPIRIES"


class TestInterpolation:
    """Tests for variance interpolation and the index."""

    def test_interpolate_matches_cboe_weights(self):
        """Test the minute-weighted blend."""
        from options_vix.vix.interpolate import interpolate_30d_variance

        n1, n2 = 15360.0, 58560.0
        t1, t2 = n1 / 525600, n2 / 525600
        var_30d = interpolate_30d_variance(t1, n1, 0.04, t2, n2, 0.09)

        expected = (
            t1 * 0.04 * (n2 - 43200) / (n2 - n1)
            + t2 * 0.09 * (43200 - n1) / (n2 - n1)
        ) * 525600 / 43200
        assert var_30d == pytest.approx(expected)

    def test_interpolate_at_target(self):
        """Test that a near term exactly at 30 days gets full weight."""
        from options_vix.vix.interpolate import interpolate_30d_variance

        var_30d = interpolate_30d_variance(43200 / 525600, 43200, 0.04, 0.2, 100000, 0.09)
        assert var_30d == pytest.approx(0.04)

    def test_interpolate_equal_expiries_non_finite(self):
        """Test that identical expiries do not produce a finite number."""
        from options_vix.vix.interpolate import interpolate_30d_variance

        var_30d = interpolate_30d_variance(0.03, 15360, 0.04, 0.03, 15360, 0.09)
        assert not np.isfinite(var_30d)

    def test_vix_index_computation(self):
        """Test VIX index from variance."""
        from options_vix.vix.interpolate import compute_vix_index

        # 16% annual vol -> variance = 0.0256
        assert compute_vix_index(0.0256) == pytest.approx(16.0)

    def test_vix_index_negative_is_nan(self):
        """Test that negative variance is not silently folded to a number."""
        from options_vix.vix.interpolate import compute_vix_index

        assert math.isnan(compute_vix_index(-0.01))


class TestComputeVix:
    """Tests for the two-expiry index."""

    def test_end_to_end_index(self, near_chain, next_chain, near_expiry, next_expiry, now):
        """Test a finite positive percentage that matches the blend of both variances."""
        from options_vix.vix.expiry import ExpiryGroup
        from options_vix.vix.interpolate import compute_vix

        near = ExpiryGroup(near_expiry, *near_chain)
        nxt = ExpiryGroup(next_expiry, *next_chain)

        index = compute_vix(near, nxt, now)

        n1, n2 = 15360.0, 58560.0
        expected_var = (
            near.time_to_expiration(now) * near.variance(now) * (n2 - 43200) / (n2 - n1)
            + nxt.time_to_expiration(now) * nxt.variance(now) * (43200 - n1) / (n2 - n1)
        ) * 525600 / 43200

        assert np.isfinite(index)
        assert index > 0
        assert index == pytest.approx(math.sqrt(expected_var) * 100)

    def test_index_is_deterministic(self, snapshot_contracts, near_expiry, next_expiry, now):
        """Test that recomputing from identical input is bit-for-bit equal."""
        from options_vix.vix.grouping import group_by_expiry
        from options_vix.vix.interpolate import compute_vix

        first = group_by_expiry(snapshot_contracts)
        second = group_by_expiry(list(snapshot_contracts))

        a = compute_vix(first[near_expiry], first[next_expiry], now)
        b = compute_vix(second[near_expiry], second[next_expiry], now)
        assert a == b

    def test_equal_expiries_non_finite(self, near_chain, near_expiry, now):
        """Test that N_T1 == N_T2 is degenerate rather than a wrong finite value."""
        from options_vix.vix.expiry import ExpiryGroup
        from options_vix.vix.interpolate import compute_vix

        near = ExpiryGroup(near_expiry, *near_chain)
        same = ExpiryGroup(near_expiry, *build_chain(near_expiry, NEXT_TIME_VALUE))

        assert not np.isfinite(compute_vix(near, same, now))

    def test_year_basis_follows_groups(self, snapshot_contracts, near_expiry, next_expiry, now):
        """Test that a 360-day basis is used for T1, T2 and N_365 alike."""
        from options_vix.vix.grouping import group_by_expiry
        from options_vix.vix.interpolate import compute_vix

        groups = group_by_expiry(snapshot_contracts, minutes_per_year=360 * 1440)
        near, nxt = groups[near_expiry], groups[next_expiry]

        index = compute_vix(near, nxt, now)

        n1, n2 = 15360.0, 58560.0
        expected_var = (
            n1 / 518400 * near.variance(now) * (n2 - 43200) / (n2 - n1)
            + n2 / 518400 * nxt.variance(now) * (43200 - n1) / (n2 - n1)
        ) * 518400 / 43200
        assert index == pytest.approx(math.sqrt(expected_var) * 100)

        # An explicit base still wins over the groups' basis
        assert compute_vix(near, nxt, now, minutes_per_year=525600) != index
