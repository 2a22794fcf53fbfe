"""
Decay text files: one ``time,signal`` pair per line, no header.
"""

import logging
from pathlib import Path

from powert_core.analysis.decay import DecaySeries
from powert_core.errors import DecayParseError

logger = logging.getLogger(__name__)


def read_decay_file(
    path: Path | str, time_scaling: float = 1.0, signal_scaling: float = 1.0
) -> DecaySeries:
    """Load a decay file.

    Args:
        path: Path to the decay file
        time_scaling: Factor applied to every time value
        signal_scaling: Factor applied to every signal value

    Returns:
        The decay with scaled times and signals

    Raises:
        FileNotFoundError: If the file does not exist
        DecayParseError: If any line is malformed; nothing is returned
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Decay file not found: {path}")

    try:
        # utf-8-sig drops a leading byte-order mark
        text = path.read_text(encoding="utf-8-sig")
    except UnicodeDecodeError as exc:
        raise DecayParseError(
            f"Failed to read the file:\n{path}\n{exc}", source=str(path)
        ) from exc
    try:
        decay = DecaySeries.from_text(text.splitlines())
    except DecayParseError as exc:
        raise DecayParseError(
            f"Failed to read the file:\n{path}\n{exc}",
            line_number=exc.line_number,
            line=exc.line,
            source=str(path),
        ) from exc

    if time_scaling != 1.0 or signal_scaling != 1.0:
        decay = DecaySeries(decay.times * time_scaling, decay.signals * signal_scaling)
    logger.debug("Read %d points from %s", len(decay), path.name)
    return decay


def write_decay_file(path: Path | str, decay: DecaySeries) -> None:
    """Write a decay as ``time,signal`` lines."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", newline="", encoding="utf-8") as f:
        for time, signal in decay:
            f.write(f"{time!r},{signal!r}\n")
    logger.info("Saved %d points to %s", len(decay), path)
