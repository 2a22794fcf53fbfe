"""
Least-squares refinement of estimated decay parameters.
"""

import logging
from typing import Callable, Iterable, Mapping

import numpy as np
from scipy import optimize

from powert_core.analysis.decay import DecaySeries
from powert_core.analysis.estimation import estimate_params
from powert_core.analysis.models import get_model
from powert_core.types.analysis import DecayFitResult, Parameters

logger = logging.getLogger(__name__)


def _r_squared(y: np.ndarray, y_fit: np.ndarray) -> float:
    ss_res = float(np.sum((y - y_fit) ** 2))
    ss_tot = float(np.sum((y - np.mean(y)) ** 2))
    return max(0.0, min(1.0, 1 - (ss_res / ss_tot) if ss_tot > 0 else 0.0))


def _start_vector(
    initial: Parameters,
    names: list[str],
    defaults: Mapping[str, float],
    lower: np.ndarray,
    upper: np.ndarray,
) -> np.ndarray:
    p0 = np.array([getattr(initial, name) for name in names], dtype=np.float64)
    # Estimates can be NaN or fall outside the bounds
    for idx, name in enumerate(names):
        if not np.isfinite(p0[idx]):
            p0[idx] = defaults[name]
    return np.clip(p0, lower, upper)


def refine_params(
    series: DecaySeries,
    initial: Parameters | None = None,
    bounds: Mapping[str, tuple[float, float]] | None = None,
    fixed: Iterable[str] = (),
    *,
    model_type: str = "power_triplet",
    relative: bool = True,
) -> DecayFitResult:
    """Refine parameters of a decay with ``scipy.optimize.least_squares``.

    Args:
        series: Decay to fit
        initial: Starting parameters; estimated from the decay when omitted
        bounds: Optional per-parameter (lower, upper) overrides
        fixed: Names of parameters kept at their initial value
        model_type: Registered model name
        relative: Weight residuals by the magnitude of the signal, so that the
            late, small part of the decay contributes as much as the early part

    Returns:
        DecayFitResult with refined parameters, success status and r_squared
    """
    model = get_model(model_type)
    if initial is None:
        initial = estimate_params(series)

    fixed_names = set(fixed)
    unknown = fixed_names - set(model.PARAM_NAMES)
    if unknown:
        raise ValueError(f"Unknown parameters: {sorted(unknown)}")
    fit_names = [name for name in model.PARAM_NAMES if name not in fixed_names]

    merged_bounds = dict(model.BOUNDS)
    if bounds:
        merged_bounds.update(bounds)
    lower = np.array([merged_bounds[name][0] for name in fit_names], dtype=np.float64)
    upper = np.array([merged_bounds[name][1] for name in fit_names], dtype=np.float64)

    # Clean data
    t_data = series.times
    y_data = series.signals
    mask = np.isfinite(t_data) & np.isfinite(y_data)
    t_clean = t_data[mask]
    y_clean = y_data[mask]
    n_valid_points = int(np.sum(mask))

    if n_valid_points < len(fit_names) or not fit_names:
        return DecayFitResult(params=initial, success=False, r_squared=0.0)

    if relative:
        floor = max(float(np.max(np.abs(y_clean))) * 1e-6, np.finfo(np.float64).tiny)
        weights = 1.0 / np.maximum(np.abs(y_clean), floor)
    else:
        weights = np.ones_like(y_clean)

    p0 = _start_vector(initial, fit_names, model.DEFAULTS, lower, upper)

    def to_params(values: np.ndarray) -> Parameters:
        changes = {name: float(values[idx]) for idx, name in enumerate(fit_names)}
        return initial.replace(**changes)

    def residual_func(values: np.ndarray) -> np.ndarray:
        y_model = to_params(values).evaluate(t_clean)
        residual = (y_clean - y_model) * weights
        # Keep the solver away from non-finite evaluations
        return np.nan_to_num(residual, nan=1e12, posinf=1e12, neginf=-1e12)

    try:
        result = optimize.least_squares(residual_func, p0, bounds=(lower, upper))
    except (ValueError, np.linalg.LinAlgError) as exc:
        logger.warning("Least-squares refinement failed: %s", exc)
        return DecayFitResult(params=initial, success=False, r_squared=0.0)

    fitted = to_params(result.x)
    r_squared = _r_squared(y_clean, fitted.evaluate(t_clean))
    logger.debug(
        "Refined %s in %d evaluations (success=%s, r2=%.4f)",
        fitted,
        result.nfev,
        result.success,
        r_squared,
    )
    return DecayFitResult(params=fitted, success=bool(result.success), r_squared=r_squared)


def fit_decays(
    named_series: Iterable[tuple[str, DecaySeries]],
    progress_callback: Callable[[int, int, str], None] | None = None,
    **kwargs,
) -> list[tuple[str, DecayFitResult]]:
    """Refine every decay of a batch independently.

    Args:
        named_series: (name, decay) pairs
        progress_callback: Optional callback function(current, total, message)
        **kwargs: Forwarded to refine_params

    Returns:
        List of tuples (name, DecayFitResult) in input order
    """
    items = list(named_series)
    total = len(items)
    results = []
    for idx, (name, series) in enumerate(items):
        results.append((name, refine_params(series, **kwargs)))
        if progress_callback:
            progress_callback(idx, total, "Fitting decays")
    return results
