"""
Gaussian Mixture Fit of the Virtual Height Histogram

================================================================================
MODEL
================================================================================
The histogram counts y(x) at the bin centers x are modelled as a sum of
Gaussian components, one per detected peak:

    y(x) = sum_k  a_k * exp(-0.5 * ((x - mu_k) / s_k)^2)

Parameters are packed flat as [a0, mu0, s0, a1, mu1, s1, ...].

Each component starts at its peak: a = peak count, mu = peak bin center,
s = half the suggested box width. Every histogram point has unit
uncertainty, so the fit minimizes the plain sum of squared residuals.

================================================================================
SOLVER
================================================================================
scipy.optimize.least_squares (trust-region reflective) with an analytic
Jacobian. Amplitudes are kept non-negative and sigmas above SIGMA_FLOOR_KM.

Convergence flavours reported by scipy (status 1-4: gtol, ftol, xtol,
ftol+xtol) are all accepted. Status 0 (evaluation cap reached) and
status -1 (improper input) mean the fit failed; the caller then falls back
to uniform bins. A failed fit is a normal outcome, never an error.
"""

from dataclasses import dataclass, field
from typing import List, Sequence
import logging

import numpy as np
from scipy.optimize import least_squares

from ..interfaces.altitude_bins import GaussianComponent
from .constants import (
    FIT_FTOL,
    FIT_XTOL,
    FIT_GTOL,
    FIT_MAX_ITERATIONS,
    FIT_MAX_FEV,
    INITIAL_SIGMA_BOX_FRACTION,
    PARAMS_PER_COMPONENT,
    SIGMA_FLOOR_KM,
)
from .histogram import Histogram
from .peak_detector import Peak

logger = logging.getLogger(__name__)

# Status used when the solver rejects its input outright
STATUS_IMPROPER_INPUT = -1


@dataclass
class MixtureFit:
    """Outcome of a Gaussian mixture fit."""
    components: List[GaussianComponent] = field(default_factory=list)
    status: int = STATUS_IMPROPER_INPUT
    cost: float = float('nan')   # 0.5 * sum of squared residuals
    nfev: int = 0
    message: str = ""

    @property
    def success(self) -> bool:
        return self.status >= 1


def gaussian_mixture(x: np.ndarray, params: Sequence[float]) -> np.ndarray:
    """Evaluate a sum of Gaussians for flat [a, mu, sigma, ...] parameters."""
    x = np.asarray(x, dtype=float)
    p = np.asarray(params, dtype=float).reshape(-1, PARAMS_PER_COMPONENT)
    y = np.zeros_like(x)
    for amp, mu, sigma in p:
        y += amp * np.exp(-0.5 * ((x - mu) / sigma) ** 2)
    return y


def _mixture_jacobian(params: np.ndarray, x: np.ndarray, y: np.ndarray,
                      y_error: np.ndarray) -> np.ndarray:
    """Partial derivatives of the weighted residuals."""
    p = params.reshape(-1, PARAMS_PER_COMPONENT)
    jac = np.empty((len(x), params.size))
    for k, (amp, mu, sigma) in enumerate(p):
        dx = x - mu
        g = np.exp(-0.5 * (dx / sigma) ** 2)
        jac[:, 3 * k] = g
        jac[:, 3 * k + 1] = amp * g * dx / sigma ** 2
        jac[:, 3 * k + 2] = amp * g * dx ** 2 / sigma ** 3
    return jac / y_error[:, None]


def _mixture_residuals(params: np.ndarray, x: np.ndarray, y: np.ndarray,
                       y_error: np.ndarray) -> np.ndarray:
    return (gaussian_mixture(x, params) - y) / y_error


def initial_parameters(hist: Histogram, peaks: Sequence[Peak],
                       vh_box: float) -> np.ndarray:
    """Seed one component per peak."""
    sigma0 = max(INITIAL_SIGMA_BOX_FRACTION * vh_box, 2.0 * SIGMA_FLOOR_KM)
    params = []
    for peak in peaks:
        params.extend([float(peak.count), float(hist.centers[peak.index]), sigma0])
    return np.array(params, dtype=float)


def fit_gaussian_mixture(hist: Histogram, peaks: Sequence[Peak],
                         vh_box: float) -> MixtureFit:
    """
    Fit one Gaussian per peak to the histogram.

    Args:
        hist: Virtual height histogram
        peaks: Detected peaks (must not be empty)
        vh_box: Suggested virtual height box width (km)

    Returns:
        MixtureFit; components are empty unless the fit converged
    """
    x = hist.centers
    y = hist.counts.astype(float)
    y_error = np.ones_like(y)   # Unity is the same as no error

    p0 = initial_parameters(hist, peaks, vh_box)
    n = len(peaks)
    lower = np.tile([0.0, -np.inf, SIGMA_FLOOR_KM], n)
    upper = np.tile([np.inf, np.inf, np.inf], n)

    try:
        result = least_squares(
            _mixture_residuals,
            p0,
            jac=_mixture_jacobian,
            bounds=(lower, upper),
            method='trf',
            ftol=FIT_FTOL,
            xtol=FIT_XTOL,
            gtol=FIT_GTOL,
            max_nfev=min(FIT_MAX_ITERATIONS, FIT_MAX_FEV),
            args=(x, y, y_error),
        )
    except (ValueError, np.linalg.LinAlgError) as e:
        logger.warning(f"Gaussian fit of {n} peaks rejected by solver: {e}")
        return MixtureFit(status=STATUS_IMPROPER_INPUT, message=str(e))

    fit = MixtureFit(
        status=int(result.status),
        cost=float(result.cost),
        nfev=int(result.nfev),
        message=str(result.message),
    )

    if not fit.success:
        logger.warning(f"Gaussian fit of {n} peaks did not converge "
                       f"(status {fit.status}): {fit.message}")
        return fit

    fit.components = [
        GaussianComponent(amplitude=float(a), mean_km=float(mu), sigma_km=float(s))
        for a, mu, s in result.x.reshape(-1, PARAMS_PER_COMPONENT)
    ]
    logger.debug(f"Gaussian fit converged (status {fit.status}, {fit.nfev} evals): "
                 + ", ".join(f"{c.mean_km:.1f}±{c.sigma_km:.1f} km"
                             for c in fit.components))
    return fit
