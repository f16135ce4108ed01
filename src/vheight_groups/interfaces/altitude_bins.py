"""
Altitude Bin Data Models

These dataclasses define the contract between the virtual-height grouping
pipeline and its consumers. An AltitudeGroups result is what a caller gets
back from select_alt_groups(); it can be serialized to JSON for logging or
for hand-off to the next processing stage.

Contract Version: 1.0.0
"""

from dataclasses import dataclass, field, asdict
from enum import Enum
from typing import Optional, List, Sequence
import json

import numpy as np


class GroupingMethod(str, Enum):
    """Which path of the grouping pipeline produced the bins."""
    GAUSSIAN_FIT = "GAUSSIAN_FIT"                                  # Fitted peaks, reconciled
    UNIFORM_NO_PEAKS = "UNIFORM_NO_PEAKS"                          # No significant histogram peak
    UNIFORM_FIT_FAILED = "UNIFORM_FIT_FAILED"                      # Least-squares did not converge
    UNIFORM_NO_VALID_PEAKS = "UNIFORM_NO_VALID_PEAKS"              # Every component drifted off its peak
    UNIFORM_EMPTY_RECONCILIATION = "UNIFORM_EMPTY_RECONCILIATION"  # Nothing survived reconciliation

    @property
    def is_fallback(self) -> bool:
        return self is not GroupingMethod.GAUSSIAN_FIT


@dataclass
class GaussianComponent:
    """One fitted term of the histogram's Gaussian mixture."""
    amplitude: float     # Peak count of the component
    mean_km: float       # Component center (virtual height)
    sigma_km: float      # Component spread (1-sigma)

    def window(self, n_sigma: float) -> tuple:
        """Return the (lower, upper) n-sigma window around the mean."""
        return (self.mean_km - n_sigma * self.sigma_km,
                self.mean_km + n_sigma * self.sigma_km)

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class AltitudeBin:
    """
    A single virtual height bin, representing one propagation mode.

    Synthetic bins were inserted to cover heights that no fitted peak
    accounted for; they carry a nominal (midpoint) peak.
    """
    lower_km: float
    upper_km: float
    peak_km: float
    synthetic: bool = False

    @property
    def width_km(self) -> float:
        return self.upper_km - self.lower_km

    def contains(self, height_km: float) -> bool:
        return self.lower_km <= height_km <= self.upper_km

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class AltitudeGroups:
    """
    Ordered, gap-free partition of the observed virtual heights.

    Bins are sorted ascending and adjacent bins share their edges.
    """
    bins: List[AltitudeBin] = field(default_factory=list)
    method: GroupingMethod = GroupingMethod.GAUSSIAN_FIT

    # Observed sample range the partition was built to cover
    local_min_km: Optional[float] = None
    local_max_km: Optional[float] = None

    # Fitted mixture, when a fit was attempted and converged
    components: List[GaussianComponent] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.bins)

    def __iter__(self):
        return iter(self.bins)

    def __getitem__(self, index: int) -> AltitudeBin:
        return self.bins[index]

    @property
    def vh_mins(self) -> np.ndarray:
        """Lower limit of each bin (km)."""
        return np.array([b.lower_km for b in self.bins], dtype=float)

    @property
    def vh_maxs(self) -> np.ndarray:
        """Upper limit of each bin (km)."""
        return np.array([b.upper_km for b in self.bins], dtype=float)

    @property
    def vh_peaks(self) -> np.ndarray:
        """Peak height estimate of each bin (km)."""
        return np.array([b.peak_km for b in self.bins], dtype=float)

    def assign(self, vh: Sequence[float]) -> np.ndarray:
        """
        Assign each virtual height to the bin that holds it.

        Bins are half-open [lower, upper) except the last, whose upper edge
        is inclusive so the observed maximum is always grouped.

        Args:
            vh: Virtual heights (km)

        Returns:
            Integer array of bin indices, -1 for heights outside every bin
        """
        heights = np.asarray(vh, dtype=float)
        groups = np.full(heights.shape, -1, dtype=int)
        if not self.bins:
            return groups

        edges = np.append(self.vh_mins, self.bins[-1].upper_km)
        idx = np.searchsorted(edges, heights, side='right') - 1

        # Inclusive top edge
        idx[heights == edges[-1]] = len(self.bins) - 1

        inside = (idx >= 0) & (idx < len(self.bins))
        groups[inside] = idx[inside]
        return groups

    def to_dict(self) -> dict:
        data = {
            "method": self.method.value,
            "bins": [b.to_dict() for b in self.bins],
            "components": [c.to_dict() for c in self.components],
        }
        if self.local_min_km is not None:
            data["local_min_km"] = self.local_min_km
        if self.local_max_km is not None:
            data["local_max_km"] = self.local_max_km
        return data

    def to_json(self) -> str:
        """Serialize to JSON."""
        return json.dumps(self.to_dict(), indent=2)

    @classmethod
    def from_json(cls, json_str: str) -> "AltitudeGroups":
        """Deserialize from JSON."""
        data = json.loads(json_str)
        return cls(
            bins=[AltitudeBin(**b) for b in data.get("bins", [])],
            method=GroupingMethod(data.get("method", "GAUSSIAN_FIT")),
            local_min_km=data.get("local_min_km"),
            local_max_km=data.get("local_max_km"),
            components=[GaussianComponent(**c) for c in data.get("components", [])],
        )
