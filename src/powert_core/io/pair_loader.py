"""
Loading of a−b / b signal pairs from a measurement folder.

A folder named after its time range holds both signals, e.g.::

    100us
    ├─ 100us-a-b.csv
    └─ 100us-b.csv

The a−b signal is the decay; the b signal marks the time origin with its
minimum (the excitation pulse).
"""

import logging
from dataclasses import dataclass
from pathlib import Path

import numpy as np

from powert_core.analysis.decay import DecaySeries
from powert_core.config import DecayLoadingConfig
from powert_core.errors import EmptyInputError
from powert_core.io.decay_csv import read_decay_file
from powert_core.io.file_names import resolve_file_name

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class SignalPair:
    name: str
    a_minus_b: DecaySeries
    b: DecaySeries
    time_origin: float

    @property
    def decay(self) -> DecaySeries:
        """The a−b signal with its time origin moved to zero."""
        return self.a_minus_b.shift_time(-self.time_origin)


def find_time_origin(b_signal: DecaySeries, window: float = 0.25) -> float:
    """Time of the minimum b signal within the leading ``window`` fraction."""
    if len(b_signal) == 0:
        raise EmptyInputError("Cannot find the time origin of an empty signal")
    head = b_signal.slice(0.0, b_signal.time_max * window)
    if len(head) == 0:
        head = b_signal
    return float(head.times[int(np.argmin(head.signals))])


def pair_file_paths(folder: Path | str, config: DecayLoadingConfig) -> tuple[Path, Path]:
    folder = Path(folder)
    basename = folder.name
    file_ab = folder / resolve_file_name(basename, config.a_minus_b_format)
    file_b = folder / resolve_file_name(basename, config.b_format)
    return file_ab, file_b


def load_signal_pair(
    folder: Path | str, config: DecayLoadingConfig | None = None
) -> SignalPair:
    """Load the a−b and b signals of a folder and locate the time origin.

    Raises:
        FileNotFoundError: If the folder or either signal file is missing
        DecayParseError: If either file is malformed
    """
    config = config or DecayLoadingConfig()
    folder = Path(folder)
    if not folder.is_dir():
        raise FileNotFoundError(f"Data folder not found: {folder}")

    file_ab, file_b = pair_file_paths(folder, config)
    for path in (file_ab, file_b):
        if not path.exists():
            raise FileNotFoundError(f"The file does not exist:\n{path}")

    a_minus_b = read_decay_file(
        file_ab, config.time_scaling, config.signal_scaling
    ).absolute()
    b = read_decay_file(file_b, config.time_scaling, config.signal_scaling)
    t0 = find_time_origin(b, config.time_origin_window)
    logger.info("Loaded %s (time origin %g)", folder.name, t0)
    return SignalPair(name=folder.name, a_minus_b=a_minus_b, b=b, time_origin=t0)
