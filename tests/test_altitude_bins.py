"""
Unit tests for the altitude bin result models.
"""

import json

import pytest
import numpy as np


def _groups():
    from vheight_groups.interfaces.altitude_bins import (
        AltitudeBin, AltitudeGroups, GaussianComponent, GroupingMethod
    )

    return AltitudeGroups(
        bins=[
            AltitudeBin(50.0, 175.0, 108.0),
            AltitudeBin(175.0, 234.0, 204.5, synthetic=True),
            AltitudeBin(234.0, 366.0, 299.0),
        ],
        method=GroupingMethod.GAUSSIAN_FIT,
        local_min_km=50.0,
        local_max_km=366.0,
        components=[GaussianComponent(580.0, 108.0, 22.0),
                    GaussianComponent(420.0, 299.0, 22.0)],
    )


class TestAltitudeGroups:
    """Test access to the bin partition."""

    def test_edge_arrays(self):
        """Verify lower/upper/peak arrays line up with the bins."""
        groups = _groups()

        np.testing.assert_array_equal(groups.vh_mins, [50.0, 175.0, 234.0])
        np.testing.assert_array_equal(groups.vh_maxs, [175.0, 234.0, 366.0])
        np.testing.assert_array_equal(groups.vh_peaks, [108.0, 204.5, 299.0])
        assert len(groups) == 3

    def test_assign(self):
        """Verify heights map to bins, edges belonging to the upper bin."""
        groups = _groups()

        labels = groups.assign([49.9, 50.0, 120.0, 175.0, 233.9, 300.0, 366.0, 366.1])

        assert labels.tolist() == [-1, 0, 0, 1, 1, 2, 2, -1]

    def test_assign_empty_groups(self):
        """Verify assigning against no bins marks everything unassigned."""
        from vheight_groups.interfaces.altitude_bins import AltitudeGroups

        assert AltitudeGroups().assign([100.0, 200.0]).tolist() == [-1, -1]

    def test_json_roundtrip(self):
        """Verify the result survives JSON serialization."""
        from vheight_groups.interfaces.altitude_bins import AltitudeGroups

        groups = _groups()
        data = json.loads(groups.to_json())

        assert data['method'] == 'GAUSSIAN_FIT'
        assert data['bins'][1]['synthetic'] is True

        restored = AltitudeGroups.from_json(groups.to_json())
        assert restored == groups


class TestGroupingMethod:
    """Test the pipeline path markers."""

    def test_fallback_flag(self):
        """Verify only the fitted path is not a fallback."""
        from vheight_groups.interfaces.altitude_bins import GroupingMethod

        assert not GroupingMethod.GAUSSIAN_FIT.is_fallback
        assert all(m.is_fallback for m in GroupingMethod if m is not GroupingMethod.GAUSSIAN_FIT)


class TestGaussianComponent:
    """Test component windows."""

    def test_window(self):
        """Verify the n-sigma window around the mean."""
        from vheight_groups.interfaces.altitude_bins import GaussianComponent

        comp = GaussianComponent(amplitude=10.0, mean_km=200.0, sigma_km=15.0)

        assert comp.window(3.0) == pytest.approx((155.0, 245.0))
        assert comp.window(2.0) == pytest.approx((170.0, 230.0))
