"""
Immutable time/signal decay traces.
"""

from typing import Iterable, Iterator

import numpy as np

from powert_core.errors import DecayParseError, EmptyInputError, InvalidArgumentError


def _frozen_array(values) -> np.ndarray:
    if not isinstance(values, np.ndarray):
        values = list(values)
    arr = np.array(values, dtype=np.float64).reshape(-1)
    arr.setflags(write=False)
    return arr


def _parse_number(text: str) -> float:
    # float() also accepts digit separators such as "1_000"
    if "_" in text:
        raise ValueError(f"could not convert string to float: {text!r}")
    return float(text)


class DecaySeries:
    """A time-ordered decay trace.

    Times are expected to be strictly increasing. Every transform returns a
    new instance; the underlying arrays are read-only.
    """

    __slots__ = ("_times", "_signals")

    def __init__(self, times: Iterable[float], signals: Iterable[float]) -> None:
        times_arr = _frozen_array(times)
        signals_arr = _frozen_array(signals)
        if times_arr.size != signals_arr.size:
            raise InvalidArgumentError("times and signals must have the same length.")
        self._times = times_arr
        self._signals = signals_arr

    @classmethod
    def empty(cls) -> "DecaySeries":
        return cls([], [])

    @classmethod
    def from_text(cls, lines: Iterable[str]) -> "DecaySeries":
        """Parse ``time,signal`` lines.

        A single malformed line (empty, wrong column count, non-numeric field)
        fails the whole load.
        """
        times: list[float] = []
        signals: list[float] = []
        for line_number, line in enumerate(lines, start=1):
            line = line.rstrip("\r\n")
            parts = line.split(",")
            if len(parts) != 2:
                raise DecayParseError(
                    f"Line {line_number}: expected 2 comma-separated fields, "
                    f"got {len(parts)}: {line!r}",
                    line_number=line_number,
                    line=line,
                )
            try:
                time = _parse_number(parts[0])
                signal = _parse_number(parts[1])
            except ValueError as exc:
                raise DecayParseError(
                    f"Line {line_number}: invalid number in {line!r}",
                    line_number=line_number,
                    line=line,
                ) from exc
            times.append(time)
            signals.append(signal)
        return cls(times, signals)

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def times(self) -> np.ndarray:
        return self._times

    @property
    def signals(self) -> np.ndarray:
        return self._signals

    def _require_points(self, what: str) -> None:
        if self._times.size == 0:
            raise EmptyInputError(f"Cannot compute {what} of an empty decay")

    @property
    def time_min(self) -> float:
        self._require_points("time_min")
        return float(np.min(self._times))

    @property
    def time_max(self) -> float:
        self._require_points("time_max")
        return float(np.max(self._times))

    @property
    def time_step(self) -> float:
        """Spacing of the first two samples."""
        self._require_points("time_step")
        if self._times.size < 2:
            raise IndexError("time_step requires at least two points")
        return float(self._times[1] - self._times[0])

    @property
    def signal_min(self) -> float:
        self._require_points("signal_min")
        return float(np.min(self._signals))

    @property
    def signal_max(self) -> float:
        self._require_points("signal_max")
        return float(np.max(self._signals))

    # ------------------------------------------------------------------
    # Transforms
    # ------------------------------------------------------------------

    def absolute(self) -> "DecaySeries":
        return DecaySeries(self._times, np.abs(self._signals))

    def scale(self, factor: float) -> "DecaySeries":
        with np.errstate(all="ignore"):
            return DecaySeries(self._times, self._signals * factor)

    def shift_time(self, offset: float) -> "DecaySeries":
        return DecaySeries(self._times + offset, self._signals)

    def slice(self, start: float, end: float) -> "DecaySeries":
        """Points from the first time >= start up to, not including, the first time >= end."""
        start_idx = int(np.searchsorted(self._times, start, side="left"))
        end_idx = int(np.searchsorted(self._times, end, side="left"))
        if end_idx < start_idx:
            end_idx = start_idx
        return DecaySeries(self._times[start_idx:end_idx], self._signals[start_idx:end_idx])

    def __mul__(self, factor: float) -> "DecaySeries":
        return self.scale(factor)

    __rmul__ = __mul__

    def __truediv__(self, factor: float) -> "DecaySeries":
        with np.errstate(all="ignore"):
            return DecaySeries(self._times, self._signals / np.float64(factor))

    # ------------------------------------------------------------------
    # Container protocol
    # ------------------------------------------------------------------

    def __len__(self) -> int:
        return int(self._times.size)

    def __iter__(self) -> Iterator[tuple[float, float]]:
        for time, signal in zip(self._times, self._signals):
            yield float(time), float(signal)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DecaySeries):
            return NotImplemented
        return np.array_equal(self._times, other._times) and np.array_equal(
            self._signals, other._signals
        )

    __hash__ = None

    def __repr__(self) -> str:
        if not len(self):
            return "DecaySeries(n=0)"
        return (
            f"DecaySeries(n={len(self)}, "
            f"time=[{self._times[0]:g}, {self._times[-1]:g}])"
        )
