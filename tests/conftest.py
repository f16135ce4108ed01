"""
Pytest configuration and fixtures for vheight-groups tests.
"""

import pytest
import sys
from pathlib import Path

import numpy as np

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / 'src'))


@pytest.fixture
def rng():
    """Seeded random generator so sample sets are reproducible."""
    return np.random.default_rng(20211)


@pytest.fixture
def grouping_params():
    """
    Grouping parameters giving 10 histogram bins of 35 km over 50-400 km.

    Edges: 50, 85, 120, 155, 190, 225, 260, 295, 330, 365, 400
    """
    return {
        'vh_min': 50.0,
        'vh_max': 400.0,
        'vh_box': 50.0,
        'min_pnts': 3,
        'max_vbin': 20,
    }


@pytest.fixture
def bimodal_heights(rng):
    """E-region population at 110 km and F-region population at 300 km."""
    e_region = rng.normal(110.0, 20.0, 1000)
    f_region = rng.normal(300.0, 20.0, 800)
    return np.clip(np.concatenate([e_region, f_region]), 50.0, 400.0)


@pytest.fixture
def single_cluster_heights(rng):
    """One population centred at 200 km."""
    return np.clip(rng.normal(200.0, 20.0, 1000), 50.0, 400.0)
