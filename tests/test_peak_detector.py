"""
Unit tests for histogram peak detection.
"""

import pytest
import numpy as np


def _histogram(counts):
    from vheight_groups.grouping.histogram import Histogram

    counts = np.asarray(counts, dtype=int)
    edges = 50.0 + 35.0 * np.arange(len(counts) + 1)
    return Histogram(counts=counts, edges=edges)


class TestRelativeMaxima:
    """Test detection of strict relative maxima."""

    def test_separated_maxima(self):
        """Verify isolated maxima are all found, in bin order."""
        from vheight_groups.grouping.peak_detector import find_peaks

        peaks = find_peaks(_histogram([0, 5, 0, 0, 8, 0, 0, 0, 3, 0]), min_pnts=3)

        assert [p.index for p in peaks] == [1, 4, 8]
        assert [p.count for p in peaks] == [5, 8, 3]
        assert not any(p.forced for p in peaks)

    def test_peak_height_is_bin_center(self):
        """Verify each peak carries its bin center."""
        from vheight_groups.grouping.peak_detector import find_peaks

        peaks = find_peaks(_histogram([0, 5, 0, 0, 8, 0, 0, 0, 3, 0]), min_pnts=3)

        assert peaks[0].height_km == pytest.approx(102.5)
        assert peaks[1].height_km == pytest.approx(207.5)

    def test_neighbour_within_two_bins_suppresses_maximum(self):
        """Verify a larger bin two away prevents a relative maximum."""
        from vheight_groups.grouping.peak_detector import find_peaks

        peaks = find_peaks(_histogram([0, 0, 4, 0, 9, 0, 0, 0, 0, 0]), min_pnts=3)

        assert [p.index for p in peaks] == [4]

    def test_edge_bins_are_not_relative_maxima(self):
        """Verify a maximum in the first bin is only found as the global maximum."""
        from vheight_groups.grouping.peak_detector import find_peaks

        peaks = find_peaks(_histogram([9, 1, 0, 0, 0, 0, 0, 0, 0, 0]), min_pnts=3)

        assert len(peaks) == 1
        assert peaks[0].index == 0
        assert peaks[0].forced


class TestGlobalMaximum:
    """Test the forced inclusion of the global maximum."""

    def test_tied_maximum_is_forced(self):
        """Verify side-by-side identical counts still yield a peak."""
        from vheight_groups.grouping.peak_detector import find_peaks

        peaks = find_peaks(_histogram([0, 7, 7, 0, 0, 0, 0, 0, 0, 0]), min_pnts=3)

        assert len(peaks) == 1
        assert peaks[0].index == 1
        assert peaks[0].count == 7
        assert peaks[0].forced

    def test_insignificant_maximum_not_forced(self):
        """Verify the global maximum must reach min_pnts."""
        from vheight_groups.grouping.peak_detector import find_peaks

        peaks = find_peaks(_histogram([0, 7, 7, 0, 0, 0, 0, 0, 0, 0]), min_pnts=10)

        assert peaks == []

    def test_forced_maximum_appended_in_detection_order(self):
        """Verify the forced maximum follows the relative maxima."""
        from vheight_groups.grouping.peak_detector import find_peaks

        peaks = find_peaks(_histogram([0, 12, 12, 0, 0, 0, 0, 9, 0, 0]), min_pnts=3)

        assert [p.index for p in peaks] == [7, 1]
        assert [p.forced for p in peaks] == [False, True]

    def test_empty_histogram_has_no_peaks(self):
        """Verify an all-zero histogram never yields a peak."""
        from vheight_groups.grouping.peak_detector import find_peaks

        assert find_peaks(_histogram([0] * 10), min_pnts=0) == []

    def test_flat_histogram_has_no_relative_maxima(self):
        """Verify equal counts only produce the forced global maximum."""
        from vheight_groups.grouping.peak_detector import find_peaks

        assert find_peaks(_histogram([50] * 10), min_pnts=100) == []

        peaks = find_peaks(_histogram([50] * 10), min_pnts=3)
        assert [p.index for p in peaks] == [0]
