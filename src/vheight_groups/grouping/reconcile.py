"""
Boundary Reconciliation - From Candidate Bins to a Height Partition

================================================================================
PROBLEM
================================================================================
The fitted candidate bins overlap one another, leave gaps between them and
rarely reach the lowest and highest observed heights. The consumer needs an
ordered sequence of bins that shares edges exactly and covers the whole
observed range [local_min, local_max].

================================================================================
ALGORITHM
================================================================================
Candidate edges are first rounded outward to whole kilometres and kept
inside [vh_min, vh_max]. Candidates are then walked in ascending order of
their lower edge (stable sort) while the output is built on a stack:

    LEFT PAD     Heights below the first candidate are covered by synthetic
                 bins of about vh_box width. A gap narrower than vh_box
                 stretches the first candidate down instead.

    OVERLAP      The candidate starts at or below the peak of the top bin,
                 or the top bin reaches the candidate's peak. The more
                 protected bin keeps its extent:
                   - top protected: the candidate is clipped to start at the
                     top's upper edge (and dropped if nothing is left);
                   - candidate protected: bins starting at or above the
                     candidate's lower edge are popped, and the new top is
                     cut back to the candidate's lower edge.

    GAP          Synthetic bins bridge the gap (narrow gaps stretch the top).

    ADJACENT     The candidate is pushed starting at the top's upper edge.

    RIGHT PAD    Heights above the last bin are covered like the left pad.

PRIORITY:
    Lower value = more protected. A fitted candidate's priority is its index
    in the candidate list. Synthetic bins, and candidates clipped by a more
    protected neighbour, get len(candidates) + their stack position, so they
    always yield to fitted bins.

Every push is checked against max_vbin; exceeding it raises
BinCapacityError rather than truncating the partition.
"""

from dataclasses import dataclass
from typing import List, Sequence
import logging
import math

import numpy as np

from ..exceptions import BinCapacityError
from ..interfaces.altitude_bins import AltitudeBin
from .limits import CandidateBin

logger = logging.getLogger(__name__)


@dataclass
class _WorkingBin:
    lower: float
    upper: float
    peak: float
    priority: int
    synthetic: bool = False

    def cut_upper(self, upper: float) -> None:
        """Move the upper edge down, keeping the peak inside the bin."""
        self.upper = upper
        if not self.lower <= self.peak <= self.upper:
            self.peak = self.lower + 0.5 * (self.upper - self.lower)


class _BinStack:
    """Output bins under construction, with capacity and priority bookkeeping."""

    def __init__(self, max_vbin: int, n_candidates: int):
        self.max_vbin = max_vbin
        self.n_candidates = n_candidates
        self._bins: List[_WorkingBin] = []

    def __len__(self) -> int:
        return len(self._bins)

    @property
    def top(self) -> _WorkingBin:
        return self._bins[-1]

    def demoted_priority(self) -> int:
        """Priority for a bin that must yield to every fitted candidate."""
        return self.n_candidates + len(self._bins)

    def push(self, wbin: _WorkingBin) -> None:
        if len(self._bins) >= self.max_vbin:
            raise BinCapacityError(len(self._bins) + 1, self.max_vbin,
                                   "exceeded new virtual height boundary limits")
        self._bins.append(wbin)

    def pop(self) -> _WorkingBin:
        return self._bins.pop()

    def fill(self, lower: float, upper: float, vh_box: float) -> None:
        """
        Cover [lower, upper] with synthetic bins of equal nominal width.

        The number of bins is int((upper - lower) / vh_box), at least one.
        Interior edges are rounded up to whole km; the last edge is upper.
        """
        vnum = max(1, int((upper - lower) / vh_box))
        vspan = (upper - lower) / vnum

        lo = lower
        for k in range(vnum):
            hi = upper if k == vnum - 1 else min(math.ceil(lower + (k + 1) * vspan), upper)
            if hi <= lo:
                continue
            self.push(_WorkingBin(lo, hi, lo + 0.5 * (hi - lo),
                                  self.demoted_priority(), synthetic=True))
            logger.debug(f"Synthetic bin [{lo:.1f}, {hi:.1f}] km")
            lo = hi

    def to_bins(self) -> List[AltitudeBin]:
        return [AltitudeBin(lower_km=float(b.lower), upper_km=float(b.upper),
                            peak_km=float(b.peak), synthetic=b.synthetic)
                for b in self._bins]


def _round_down(value: float, vh_min: float) -> float:
    return max(float(math.floor(value)), vh_min)


def _round_up(value: float, vh_max: float) -> float:
    return min(float(math.ceil(value)), vh_max)


def _sorted_working_bins(candidates: Sequence[CandidateBin], vh_min: float,
                         vh_max: float) -> List[_WorkingBin]:
    """Round candidates outward and order them by lower edge."""
    order = np.argsort([c.lower_km for c in candidates], kind='stable')
    working = []
    for i in order:
        c = candidates[i]
        wbin = _WorkingBin(_round_down(c.lower_km, vh_min),
                           _round_up(c.upper_km, vh_max),
                           c.peak_km, priority=int(i))
        if wbin.lower < wbin.upper:
            working.append(wbin)
        else:
            logger.debug(f"Ignoring empty candidate [{c.lower_km:.1f}, {c.upper_km:.1f}] km")
    return working


def _pad_or_stretch(stack: _BinStack, lower: float, upper: float,
                    vh_box: float) -> bool:
    """
    Bridge [lower, upper] with synthetic bins when it is at least vh_box wide.

    Returns False when the span is too narrow, in which case the caller
    stretches a neighbouring bin instead.
    """
    if int((upper - lower) / vh_box) == 0:
        return False
    stack.fill(lower, upper, vh_box)
    return True


def reconcile_boundaries(candidates: Sequence[CandidateBin], vh_min: float,
                         vh_max: float, local_min: float, local_max: float,
                         vh_box: float, max_vbin: int) -> List[AltitudeBin]:
    """
    Sort candidate bins and remove their overlaps and gaps.

    Args:
        candidates: Fitted candidate bins, in priority order
        vh_min: Minimum allowable virtual height (km)
        vh_max: Maximum allowable virtual height (km)
        local_min: Lowest observed virtual height (km)
        local_max: Highest observed virtual height (km)
        vh_box: Suggested virtual height bin width (km)
        max_vbin: Maximum number of virtual height bins

    Returns:
        Ordered, edge-sharing bins; empty if no candidate had a usable width

    Raises:
        BinCapacityError: if more than max_vbin bins are needed
    """
    working = _sorted_working_bins(candidates, vh_min, vh_max)
    if not working:
        return []

    stack = _BinStack(max_vbin, len(candidates))

    # Heights below the lowest candidate
    start = _round_down(local_min, vh_min)
    if working[0].lower > start:
        if not _pad_or_stretch(stack, start, working[0].lower, vh_box):
            working[0].lower = start

    for cand in working:
        if len(stack) == 0:
            stack.push(cand)
            continue

        top = stack.top
        if cand.lower <= top.peak or top.upper >= cand.peak:
            if top.priority < cand.priority:
                # Keep the top bin whole, start the candidate after it
                lower = top.upper
                if cand.upper > lower:
                    stack.push(_WorkingBin(lower, cand.upper,
                                           lower + 0.5 * (cand.upper - lower),
                                           stack.demoted_priority()))
            else:
                # Cut back whatever the candidate overlaps
                while len(stack) > 0 and cand.lower <= stack.top.lower:
                    dropped = stack.pop()
                    logger.debug(f"Dropped bin [{dropped.lower:.1f}, {dropped.upper:.1f}] km")
                if len(stack) > 0:
                    stack.top.cut_upper(cand.lower)
                stack.push(cand)
        elif top.upper < cand.lower:
            if not _pad_or_stretch(stack, top.upper, cand.lower, vh_box):
                top.upper = cand.lower
            stack.push(cand)
        else:
            cand.lower = top.upper
            if cand.lower < cand.upper:
                stack.push(cand)

    # Heights above the highest bin
    end = _round_up(local_max, vh_max)
    if stack.top.upper < end:
        if not _pad_or_stretch(stack, stack.top.upper, end, vh_box):
            stack.top.upper = end

    return stack.to_bins()
