"""
Histogram of observed virtual heights.

The histogram covers the caller's plausible height range [vh_min, vh_max]
with equal-width bins, a quarter of the suggested box width each, capped
at MAX_HISTOGRAM_BINS.
"""

from dataclasses import dataclass
import logging

import numpy as np

from ..exceptions import InvalidHistogramError
from .constants import HISTOGRAM_BOX_FRACTION, MAX_HISTOGRAM_BINS

logger = logging.getLogger(__name__)


@dataclass
class Histogram:
    """Binned virtual height distribution."""
    counts: np.ndarray   # Samples per bin (int)
    edges: np.ndarray    # nbin + 1 bin edges (km)

    @property
    def nbin(self) -> int:
        return len(self.counts)

    @property
    def bin_width(self) -> float:
        return float(self.edges[1] - self.edges[0])

    @property
    def centers(self) -> np.ndarray:
        """Bin centers (km)."""
        return self.edges[:-1] + 0.5 * self.bin_width


def histogram_bin_count(vh_min: float, vh_max: float, vh_box: float) -> int:
    """
    Number of histogram bins for a height range and suggested box width.

    Raises:
        InvalidHistogramError: if the range supports no bins at all
    """
    nbin = int((vh_max - vh_min) / (vh_box * HISTOGRAM_BOX_FRACTION))
    if nbin > MAX_HISTOGRAM_BINS:
        nbin = MAX_HISTOGRAM_BINS
    if nbin <= 0:
        raise InvalidHistogramError(nbin, vh_min, vh_max, vh_box)
    return nbin


def build_histogram(vh: np.ndarray, vh_min: float, vh_max: float,
                    vh_box: float) -> Histogram:
    """
    Histogram the virtual heights over [vh_min, vh_max].

    Heights outside the range are not counted.
    """
    nbin = histogram_bin_count(vh_min, vh_max, vh_box)
    counts, edges = np.histogram(vh, bins=nbin, range=(vh_min, vh_max))
    logger.debug(f"Histogram: {nbin} bins of {edges[1] - edges[0]:.2f} km, "
                 f"counts={counts.tolist()}")
    return Histogram(counts=counts.astype(int), edges=edges.astype(float))
