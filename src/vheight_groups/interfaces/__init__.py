"""Result data models shared between the grouping pipeline and its callers."""

from .altitude_bins import (
    AltitudeBin,
    AltitudeGroups,
    GaussianComponent,
    GroupingMethod,
)

__all__ = ['AltitudeBin', 'AltitudeGroups', 'GaussianComponent', 'GroupingMethod']
