"""
Error types raised by the decay analysis kernel.

Numeric degeneracy (NaN or infinite results from the regression or the model)
is not an error and is returned as is.
"""


class InvalidArgumentError(ValueError):
    """Raised when a decay is constructed from arrays of different lengths."""


class DecayParseError(ValueError):
    """Raised when decay text cannot be parsed; no partial data is returned."""

    def __init__(
        self,
        message: str,
        *,
        line_number: int | None = None,
        line: str | None = None,
        source: str | None = None,
    ) -> None:
        super().__init__(message)
        self.line_number = line_number
        self.line = line
        self.source = source


class EmptyInputError(ValueError):
    """Raised when statistics or estimation are requested on an empty decay."""


__all__ = ["InvalidArgumentError", "DecayParseError", "EmptyInputError"]
