"""
Analysis types for decay fitting.
"""

import math
from dataclasses import asdict, dataclass, replace
from typing import Iterable

import numpy as np

# Column order used by parameter tables and model vectors
PARAMETER_NAMES: tuple[str, ...] = ("a0", "a", "alpha", "at", "tau_t")


def format_number(value: float) -> str:
    """Shortest round-trip text for a float, without a trailing '.0'.

    Exponents use an upper-case marker, e.g. ``1E-07``.
    """
    value = float(value)
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    text = repr(value).replace("e", "E")
    if text.endswith(".0"):
        text = text[:-2]
    return text


@dataclass(frozen=True, slots=True)
class Parameters:
    """Two-component decay parameters.

    f(x) = a0 / (1 + a*x)^alpha + at * exp(-x / tau_t)
    """

    a0: float
    """Initial charge carrier absorption."""
    a: float
    """Empirical rate-shape parameter."""
    alpha: float
    """Power-law decay exponent in the late region."""
    at: float
    """Initial triplet exciton absorption."""
    tau_t: float
    """Lifetime of the triplet exciton."""

    @classmethod
    def from_sequence(cls, values: Iterable[float]) -> "Parameters":
        values = [float(v) for v in values]
        if len(values) != len(PARAMETER_NAMES):
            raise ValueError(
                f"Expected {len(PARAMETER_NAMES)} parameter values, got {len(values)}"
            )
        return cls(*values)

    def evaluate(self, x):
        """Evaluate the model at ``x`` (scalar or array).

        Degenerate parameters give NaN or infinite values instead of raising.
        """
        x_arr = np.asarray(x, dtype=np.float64)
        with np.errstate(all="ignore"):
            power = np.float64(self.a0) / np.power(1.0 + self.a * x_arr, self.alpha)
            triplet = self.at * np.exp(-x_arr / np.float64(self.tau_t))
            result = power + triplet
        if result.ndim == 0:
            return float(result)
        return result

    def get_function(self):
        return self.evaluate

    def replace(self, **changes: float) -> "Parameters":
        return replace(self, **changes)

    def to_dict(self) -> dict[str, float]:
        return asdict(self)

    def to_tuple(self) -> tuple[float, ...]:
        return tuple(getattr(self, name) for name in PARAMETER_NAMES)

    def __str__(self) -> str:
        a0, a, alpha, at, tau_t = (format_number(v) for v in self.to_tuple())
        return f"{a0} / ((1 + {a} * x) ^ {alpha}) + {at} * exp(-x / {tau_t})"


@dataclass
class DecayFitResult:
    """Result of refining decay parameters."""

    params: Parameters
    success: bool
    r_squared: float = 0.0

    def to_dict(self) -> dict[str, float]:
        """Convert result to flat dictionary of parameter values."""
        result: dict[str, float] = dict(self.params.to_dict())
        result["success"] = self.success
        result["r_squared"] = self.r_squared
        return result
