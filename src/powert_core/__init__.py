"""
Transient-absorption decay analysis: decay traces, parameter estimation and
the power-law plus triplet decay model.
"""

from powert_core.analysis.decay import DecaySeries
from powert_core.analysis.estimation import estimate_params
from powert_core.errors import DecayParseError, EmptyInputError, InvalidArgumentError
from powert_core.types.analysis import Parameters

__version__ = "0.1.0"

__all__ = [
    "DecaySeries",
    "estimate_params",
    "Parameters",
    "DecayParseError",
    "EmptyInputError",
    "InvalidArgumentError",
]
