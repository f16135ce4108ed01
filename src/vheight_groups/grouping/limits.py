"""
Candidate altitude bins from the fitted Gaussian components.

Each component proposes a bin spanning its 3-sigma window. The proposal is
only kept when the histogram peak that seeded the component still lies in
the component's 2-sigma window; otherwise the fit has pulled the component
away from the data it was meant to describe.
"""

from dataclasses import dataclass
from typing import List, Sequence
import logging

from ..exceptions import BinCapacityError
from ..interfaces.altitude_bins import GaussianComponent
from .constants import BOUNDARY_N_SIGMA, VALIDATION_N_SIGMA
from .peak_detector import Peak

logger = logging.getLogger(__name__)


@dataclass
class CandidateBin:
    """A fitted altitude bin before reconciliation."""
    lower_km: float
    upper_km: float
    peak_km: float


def _clipped_window(component: GaussianComponent, n_sigma: float,
                    vh_min: float, vh_max: float) -> tuple:
    low, high = component.window(n_sigma)
    return max(low, vh_min), min(high, vh_max)


def extract_limits(peaks: Sequence[Peak], components: Sequence[GaussianComponent],
                   vh_min: float, vh_max: float, max_vbin: int) -> List[CandidateBin]:
    """
    Turn fitted components into validated candidate bins.

    Args:
        peaks: Detected peaks, in the order the components were seeded
        components: Fitted components, one per peak
        vh_min: Minimum allowable virtual height (km)
        vh_max: Maximum allowable virtual height (km)
        max_vbin: Maximum number of virtual height bins

    Returns:
        Accepted candidates, in acceptance order

    Raises:
        BinCapacityError: if more than max_vbin candidates are accepted
    """
    candidates: List[CandidateBin] = []

    for peak, component in zip(peaks, components):
        vmin, vmax = _clipped_window(component, BOUNDARY_N_SIGMA, vh_min, vh_max)
        vlow, vhigh = _clipped_window(component, VALIDATION_N_SIGMA, vh_min, vh_max)

        if not (vlow <= peak.height_km <= vhigh):
            logger.debug(f"Discarding component at {component.mean_km:.1f} km: "
                         f"peak {peak.height_km:.1f} km outside "
                         f"[{vlow:.1f}, {vhigh:.1f}]")
            continue

        if len(candidates) >= max_vbin:
            raise BinCapacityError(len(candidates) + 1, max_vbin,
                                   "histogram fits created too many vheight bins")

        candidates.append(CandidateBin(lower_km=vmin, upper_km=vmax,
                                       peak_km=component.mean_km))

    return candidates
