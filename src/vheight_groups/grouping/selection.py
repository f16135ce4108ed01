"""
Virtual Height Group Selection

Entry point of the grouping pipeline:

    histogram → peaks → Gaussian mixture fit → candidate limits → reconciliation
                  │               │                    │                 │
                  └── none ───────┴── fit failed ──────┴── none valid ───┴── empty
                                                        ▼
                                                 uniform fallback

The call is pure: nothing is cached between calls, and every working
structure is discarded before returning.
"""

from typing import Sequence
import logging

import numpy as np

from ..config import GroupingConfig
from ..exceptions import InvalidConfigurationError
from ..interfaces.altitude_bins import AltitudeGroups, GroupingMethod
from .fallback import uniform_bins
from .gaussian_fit import fit_gaussian_mixture
from .histogram import build_histogram
from .limits import extract_limits
from .peak_detector import find_peaks
from .reconcile import reconcile_boundaries

logger = logging.getLogger(__name__)


def _validate_samples(vh: Sequence[float]) -> np.ndarray:
    heights = np.asarray(vh, dtype=float).ravel()
    finite = np.isfinite(heights)
    if not finite.all():
        logger.warning(f"Dropping {int((~finite).sum())} non-finite virtual heights")
        heights = heights[finite]
    if heights.size == 0:
        raise InvalidConfigurationError("no finite virtual heights to group")
    return heights


def _validate_parameters(vh_min: float, vh_max: float, vh_box: float,
                         max_vbin: int) -> None:
    if not vh_box > 0:
        raise InvalidConfigurationError(f"vh_box must be positive, got {vh_box}")
    if not vh_max > vh_min:
        raise InvalidConfigurationError(
            f"vh_max ({vh_max}) must be greater than vh_min ({vh_min})")
    if max_vbin < 1:
        raise InvalidConfigurationError(f"max_vbin must be at least 1, got {max_vbin}")


def select_alt_groups(vh: Sequence[float], vh_min: float, vh_max: float,
                      vh_box: float, min_pnts: int, max_vbin: int) -> AltitudeGroups:
    """
    Divide virtual heights into altitude bins, one per propagation mode.

    Looks at the distribution of the heights and fits a Gaussian to each
    occurrence peak to establish the bin limits. Without usable peaks the
    observed range is split into bins of the suggested width.

    Args:
        vh: Virtual heights (km)
        vh_min: Minimum allowable virtual height (km)
        vh_max: Maximum allowable virtual height (km)
        vh_box: Suggested virtual height bin width (km)
        min_pnts: Minimum number of points for the histogram's global
            maximum to count as a peak
        max_vbin: Maximum number of virtual height bins

    Returns:
        AltitudeGroups with ascending, edge-sharing bins

    Raises:
        InvalidConfigurationError: bad parameters, no finite heights, no
            heights inside [vh_min, vh_max], or a range too small for a histogram (InvalidHistogramError)
        BinCapacityError: more than max_vbin bins would be needed

    Example:
        >>> groups = select_alt_groups(heights, 75.0, 900.0, 50.0, 3, 20)
        >>> for b in groups:
        ...     print(f"{b.lower_km:.0f}-{b.upper_km:.0f} km (peak {b.peak_km:.0f})")
    """
    _validate_parameters(vh_min, vh_max, vh_box, max_vbin)
    heights = _validate_samples(vh)
    if not ((heights >= vh_min) & (heights <= vh_max)).any():
        raise InvalidConfigurationError(
            f"no virtual heights inside [{vh_min}, {vh_max}] km")

    local_min = float(heights.min())
    local_max = float(heights.max())

    hist = build_histogram(heights, vh_min, vh_max, vh_box)
    peaks = find_peaks(hist, min_pnts)

    def fallback(method: GroupingMethod, components=None) -> AltitudeGroups:
        bins = uniform_bins(local_min, local_max, vh_min, vh_max, vh_box, max_vbin)
        if not bins:
            raise InvalidConfigurationError(
                f"observed range [{local_min}, {local_max}] km gives no bins "
                f"inside [{vh_min}, {vh_max}] km")
        logger.info(f"{len(heights)} heights → {len(bins)} uniform bins ({method.value})")
        return AltitudeGroups(bins=bins, method=method, local_min_km=local_min,
                              local_max_km=local_max, components=components or [])

    if not peaks:
        return fallback(GroupingMethod.UNIFORM_NO_PEAKS)

    fit = fit_gaussian_mixture(hist, peaks, vh_box)
    if not fit.success:
        return fallback(GroupingMethod.UNIFORM_FIT_FAILED)

    candidates = extract_limits(peaks, fit.components, vh_min, vh_max, max_vbin)
    if not candidates:
        return fallback(GroupingMethod.UNIFORM_NO_VALID_PEAKS, fit.components)

    bins = reconcile_boundaries(candidates, vh_min, vh_max, local_min, local_max,
                                vh_box, max_vbin)
    if not bins:
        return fallback(GroupingMethod.UNIFORM_EMPTY_RECONCILIATION, fit.components)

    logger.info(f"{len(heights)} heights → {len(bins)} bins from "
                f"{len(candidates)} fitted peaks")
    return AltitudeGroups(bins=bins, method=GroupingMethod.GAUSSIAN_FIT,
                          local_min_km=local_min, local_max_km=local_max,
                          components=fit.components)


def select_alt_groups_from_config(vh: Sequence[float],
                                  config: GroupingConfig) -> AltitudeGroups:
    """Run select_alt_groups() with parameters from a GroupingConfig."""
    return select_alt_groups(
        vh,
        vh_min=config.vh_min,
        vh_max=config.vh_max,
        vh_box=config.vh_box,
        min_pnts=config.min_pnts,
        max_vbin=config.max_vbin,
    )
