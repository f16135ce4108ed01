"""
Peak detection in the virtual height histogram.

A relative maximum must be strictly greater than PEAK_ORDER neighbours on
each side, so two identical counts side by side never qualify. That can
hide the dominant population, so the global maximum is added as well when
it is significant (at least min_pnts samples).
"""

from dataclasses import dataclass
from typing import List
import logging

import numpy as np
from scipy.signal import argrelmax

from .constants import PEAK_ORDER
from .histogram import Histogram

logger = logging.getLogger(__name__)


@dataclass
class Peak:
    """A histogram bin flagged as a population peak."""
    index: int            # Histogram bin index
    count: int            # Samples in the bin
    height_km: float      # Bin center
    forced: bool = False  # Added as the global maximum, not a relative one


def find_peaks(hist: Histogram, min_pnts: int) -> List[Peak]:
    """
    Find the population peaks of a histogram.

    Args:
        hist: Virtual height histogram
        min_pnts: Minimum count for the global maximum to be added when it
            is not already a relative maximum

    Returns:
        Peaks in detection order: relative maxima by ascending bin, then
        the forced global maximum (if any)
    """
    counts = hist.counts
    centers = hist.centers

    relmax = argrelmax(counts, order=PEAK_ORDER, mode='clip')[0]
    peaks = [Peak(index=int(i), count=int(counts[i]), height_km=float(centers[i]))
             for i in relmax]

    imax = int(np.argmax(counts))
    if imax not in relmax and counts[imax] > 0 and counts[imax] >= min_pnts:
        peaks.append(Peak(index=imax, count=int(counts[imax]),
                          height_km=float(centers[imax]), forced=True))
        logger.debug(f"Added global maximum bin {imax} ({counts[imax]} points)")

    logger.debug(f"Found {len(peaks)} peaks: "
                 f"{[(p.index, p.count) for p in peaks]}")
    return peaks
