#!/usr/bin/env python3
"""
Virtual Height Grouping Constants - Central Reference for the Pipeline

================================================================================
PURPOSE
================================================================================
Single source of truth for the numerical settings used by the histogram,
peak detection, Gaussian fitting and boundary reconciliation stages.

================================================================================
PROPAGATION REGIONS
================================================================================
Typical virtual heights of the backscatter populations being separated:

    E-region:        ~90-150 km
    F-region:        ~150-450 km
    Ground scatter:  virtual heights well above the F peak (multi-hop)

The histogram is deliberately coarse (at most 10 bins) so that each
population shows up as one peak rather than as a noisy ridge.
"""

# =============================================================================
# HISTOGRAM
# =============================================================================

# Histogram bins are a quarter of the suggested virtual height box
HISTOGRAM_BOX_FRACTION = 0.25

# Upper limit on the number of histogram bins
MAX_HISTOGRAM_BINS = 10

# =============================================================================
# PEAK DETECTION
# =============================================================================

# Neighbours on each side a bin must exceed to be a relative maximum
PEAK_ORDER = 2

# =============================================================================
# GAUSSIAN MIXTURE FIT
# =============================================================================

# Parameters per component: amplitude, mean, sigma
PARAMS_PER_COMPONENT = 3

# Initial sigma as a fraction of the suggested box width
INITIAL_SIGMA_BOX_FRACTION = 0.5

# Solver tolerances and caps
FIT_FTOL = 1.0e-10
FIT_XTOL = 1.0e-10
FIT_GTOL = 1.0e-10
FIT_MAX_ITERATIONS = 200
FIT_MAX_FEV = 1600

# Smallest sigma the solver may reach (km); keeps a single repeated
# height from collapsing a component to zero width
SIGMA_FLOOR_KM = 1.0e-3

# =============================================================================
# LIMIT EXTRACTION
# =============================================================================

# Bin boundaries span +/- BOUNDARY_N_SIGMA around the fitted mean
BOUNDARY_N_SIGMA = 3.0

# The seeding peak must lie within +/- VALIDATION_N_SIGMA of the fitted mean
VALIDATION_N_SIGMA = 2.0
