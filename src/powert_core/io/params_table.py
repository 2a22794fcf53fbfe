"""
Parameter tables: one row per decay with its name and the five model parameters.

Text tables are what spreadsheet applications exchange through the clipboard:
tab-separated when copied from here, comma-separated when pasted back from a
spreadsheet. Files are written and read as CSV with pandas.
"""

import logging
from pathlib import Path
from typing import Iterable

import pandas as pd

from powert_core.types.analysis import PARAMETER_NAMES, Parameters

logger = logging.getLogger(__name__)

TABLE_HEADER = ("Name", "A0", "A", "α", "AT", "τt")


def format_params_table(rows: Iterable[tuple[str, Parameters]]) -> str:
    """Tab-separated table with two decimals per value."""
    lines = ["\t".join(TABLE_HEADER)]
    for name, params in rows:
        values = "\t".join(f"{value:.2f}" for value in params.to_tuple())
        lines.append(f"{name}\t{values}")
    return "\n".join(lines)


def parse_params_table(text: str, delimiter: str | None = None) -> list[tuple[str, Parameters]]:
    """Parse a pasted parameter table.

    The first non-empty line is a header and is skipped, as are rows with fewer
    than six fields. A non-numeric value in a kept row raises ``ValueError``.

    Args:
        text: Table text
        delimiter: Field separator; detected from the header when omitted
    """
    lines = [line for line in text.splitlines() if line.strip()]
    if not lines:
        return []
    if delimiter is None:
        delimiter = "\t" if "\t" in lines[0] else ","

    rows: list[tuple[str, Parameters]] = []
    for line in lines[1:]:
        values = line.split(delimiter)
        if len(values) < len(TABLE_HEADER):
            logger.debug("Skipping short row: %r", line)
            continue
        name = values[0]
        params = Parameters.from_sequence(values[1 : len(TABLE_HEADER)])
        rows.append((name, params))
    return rows


def params_to_frame(rows: Iterable[tuple[str, Parameters]]) -> pd.DataFrame:
    records = [{"name": name, **params.to_dict()} for name, params in rows]
    return pd.DataFrame(records, columns=["name", *PARAMETER_NAMES])


def save_params_csv(rows: Iterable[tuple[str, Parameters]], output_path: Path | str) -> Path:
    """Write a parameter table as CSV."""
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    df = params_to_frame(rows)
    df.to_csv(output_path, index=False)
    logger.info("Saved %d parameter rows to %s", len(df), output_path)
    return output_path


def load_params_csv(csv_path: Path | str) -> list[tuple[str, Parameters]]:
    """Read a parameter table written by save_params_csv."""
    csv_path = Path(csv_path)
    if not csv_path.exists():
        raise FileNotFoundError(f"Parameter CSV not found: {csv_path}")

    df = pd.read_csv(csv_path)
    required_cols = {"name", *PARAMETER_NAMES}
    if not required_cols.issubset(df.columns):
        missing = required_cols - set(df.columns)
        raise ValueError(f"CSV missing required columns: {sorted(missing)}")

    return [
        (str(record["name"]), Parameters.from_sequence(record[name] for name in PARAMETER_NAMES))
        for record in df.to_dict("records")
    ]
