"""
Uniform virtual height bins of the suggested width.

Used whenever the histogram shows no usable structure: no significant
peak, a fit that did not converge, or no fitted component that validated.
"""

from typing import List
import logging
import math

from ..exceptions import BinCapacityError
from ..interfaces.altitude_bins import AltitudeBin

logger = logging.getLogger(__name__)


def uniform_bins(local_min: float, local_max: float, vh_min: float,
                 vh_max: float, vh_box: float, max_vbin: int) -> List[AltitudeBin]:
    """
    Cover [local_min, local_max] with bins vh_box wide.

    The first bin starts span / n - vh_box below local_min, or is centred
    on the value when the span is zero. Bins are clipped to
    [vh_min, vh_max] and creation stops once vh_max is reached.

    Raises:
        BinCapacityError: if more than max_vbin bins are needed
    """
    span = local_max - local_min
    nbins = max(1, int(math.ceil(span / vh_box)))
    if nbins > max_vbin:
        raise BinCapacityError(nbins, max_vbin,
                               "suggested width created too many vheight bins")

    if span > 0:
        lower = span / nbins + local_min - vh_box
    else:
        lower = local_min - 0.5 * vh_box
    lower = max(lower, vh_min)

    bins: List[AltitudeBin] = []
    while len(bins) < nbins:
        upper = min(lower + vh_box, vh_max)
        if upper <= lower:
            break
        bins.append(AltitudeBin(lower_km=lower, upper_km=upper,
                                peak_km=lower + 0.5 * (upper - lower),
                                synthetic=True))
        if upper >= vh_max:
            break
        lower = upper

    logger.debug(f"Uniform fallback: {len(bins)} bins of {vh_box} km "
                 f"over [{local_min:.1f}, {local_max:.1f}] km")
    return bins
