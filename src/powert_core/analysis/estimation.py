"""
Closed-form parameter estimation from the late-time tail of a decay.
"""

import logging

import numpy as np

from powert_core.analysis.decay import DecaySeries
from powert_core.errors import EmptyInputError
from powert_core.types.analysis import Parameters

logger = logging.getLogger(__name__)

# Constants with no estimation behind them
DEFAULT_A = 1.0
DEFAULT_TAU_T = 0.3
ROUNDING_BUCKET = 100.0


def linear_regression(x: np.ndarray, y: np.ndarray) -> tuple[float, float]:
    """Ordinary least squares of ``y`` on ``x`` via closed-form sums.

    Returns (slope, intercept). A zero denominator (no points, or all ``x``
    equal) yields NaN or infinite values.
    """
    x = np.asarray(x, dtype=np.float64)
    y = np.asarray(y, dtype=np.float64)
    n = np.float64(x.size)
    with np.errstate(all="ignore"):
        sx = np.sum(x)
        sy = np.sum(y)
        sxx = np.sum(x * x)
        sxy = np.sum(x * y)
        denom = n * sxx - sx * sx
        slope = (n * sxy - sx * sy) / denom
        intercept = (sxx * sy - sx * sxy) / denom
    return float(slope), float(intercept)


def _round_to_bucket(value: float) -> float:
    # np.round rounds half to even and passes NaN/inf through
    return float(np.round(value / ROUNDING_BUCKET) * ROUNDING_BUCKET)


def estimate_params(series: DecaySeries) -> Parameters:
    """Estimate starting parameters from the last half of the decay.

    The power-law exponent and amplitude come from a log-log regression over
    the tail window; the triplet amplitude is whatever the rounded maximum
    signal leaves above ``a0``.
    """
    n = len(series)
    if n == 0:
        raise EmptyInputError("Cannot estimate parameters of an empty decay")

    # TODO: estimate a and tau_t instead of using fixed values
    last_half = n >> 1
    with np.errstate(all="ignore"):
        log_x = np.log(series.times[n - last_half :])
        log_y = np.log(series.signals[n - last_half :])

    slope, intercept = linear_regression(log_x, log_y)
    if np.isnan(intercept):
        logger.debug("Regression intercept is NaN over %d tail points", last_half)
        eip = float(series.signals[0])
    else:
        with np.errstate(over="ignore"):
            eip = float(np.exp(intercept))

    a0 = _round_to_bucket(eip)
    alpha = -float(np.round(slope, 2))
    at = float(np.maximum(_round_to_bucket(series.signal_max) - a0, 0.0))
    return Parameters(a0=a0, a=DEFAULT_A, alpha=alpha, at=at, tau_t=DEFAULT_TAU_T)
