"""
Virtual height grouping for vheight-groups.

Histogram, peak detection, Gaussian mixture fitting, limit extraction and
boundary reconciliation stages, plus the orchestrating entry point.
"""

from .selection import select_alt_groups, select_alt_groups_from_config

__all__ = ['select_alt_groups', 'select_alt_groups_from_config']
