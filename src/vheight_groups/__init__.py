"""
vheight-groups: Virtual Height Grouping for HF Radar Backscatter

Separates scattered radar-echo virtual heights into altitude bands, one per
propagation mode (E-region, F-region, ground scatter, ...), before further
geophysical analysis.

Pipeline:
    histogram → peak detection → Gaussian mixture fit → candidate limits
    → boundary reconciliation   (uniform bins when no peak can be trusted)

Usage:
    from vheight_groups import select_alt_groups

    groups = select_alt_groups(vh, vh_min=75.0, vh_max=900.0, vh_box=50.0,
                               min_pnts=3, max_vbin=20)
    labels = groups.assign(vh)

Version: 1.0.0
"""

__version__ = "1.0.0"

from .config import GroupingConfig, load_config, setup_logging
from .exceptions import (
    AltitudeGroupingError,
    BinCapacityError,
    InvalidConfigurationError,
    InvalidHistogramError,
)
from .interfaces.altitude_bins import (
    AltitudeBin,
    AltitudeGroups,
    GaussianComponent,
    GroupingMethod,
)
from .grouping.selection import select_alt_groups, select_alt_groups_from_config

__all__ = [
    "select_alt_groups",
    "select_alt_groups_from_config",
    "AltitudeBin",
    "AltitudeGroups",
    "GaussianComponent",
    "GroupingMethod",
    "GroupingConfig",
    "load_config",
    "setup_logging",
    "AltitudeGroupingError",
    "BinCapacityError",
    "InvalidConfigurationError",
    "InvalidHistogramError",
    "__version__",
]
