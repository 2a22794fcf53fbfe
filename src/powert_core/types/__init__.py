"""
Shared value types for decay analysis.
"""

from powert_core.types.analysis import (
    PARAMETER_NAMES,
    DecayFitResult,
    Parameters,
    format_number,
)

__all__ = [
    "PARAMETER_NAMES",
    "DecayFitResult",
    "Parameters",
    "format_number",
]
