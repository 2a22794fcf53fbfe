"""
Power-triplet model: power-law charge carrier decay plus triplet exciton decay.

    f(t) = a0 / (1 + a*t)^alpha + at * exp(-t / tau_t)
"""

import numpy as np
from typing import TypedDict

from powert_core.types.analysis import PARAMETER_NAMES, Parameters


class Params(TypedDict):
    a0: float
    a: float
    alpha: float
    at: float
    tau_t: float


class Bounds(TypedDict):
    a0: tuple[float, float]
    a: tuple[float, float]
    alpha: tuple[float, float]
    at: tuple[float, float]
    tau_t: tuple[float, float]


PARAM_NAMES: tuple[str, ...] = PARAMETER_NAMES


PARAM_LABELS: dict[str, str] = {
    "a0": "A0 / ΔµOD",
    "a": "a / µs⁻¹",
    "alpha": "α",
    "at": "AT / ΔµOD",
    "tau_t": "τT / µs",
}


DEFAULTS: Params = {
    "a0": 1000.0,
    "a": 1.0,
    "alpha": 0.4,
    "at": 0.0,
    "tau_t": 0.3,
}


BOUNDS: Bounds = {
    "a0": (0.0, np.inf),
    "a": (1e-6, 1e6),
    "alpha": (0.0, 10.0),
    "at": (0.0, np.inf),
    "tau_t": (1e-6, 1e6),
}


def eval(t: np.ndarray, params: Params) -> np.ndarray:
    values = Parameters(**{name: float(params[name]) for name in PARAM_NAMES})
    return np.asarray(values.evaluate(np.asarray(t, dtype=np.float64)))
