"""
IO utilities for decay files, parameter tables and data folders.
"""

from powert_core.io.file_names import natural_sort_key, resolve_file_name
from powert_core.io.decay_csv import read_decay_file, write_decay_file
from powert_core.io.params_table import (
    format_params_table,
    load_params_csv,
    params_to_frame,
    parse_params_table,
    save_params_csv,
)
from powert_core.io.pair_loader import (
    SignalPair,
    find_time_origin,
    load_signal_pair,
    pair_file_paths,
)

__all__ = [
    # File names
    "natural_sort_key",
    "resolve_file_name",
    # Decay files
    "read_decay_file",
    "write_decay_file",
    # Parameter tables
    "format_params_table",
    "load_params_csv",
    "params_to_frame",
    "parse_params_table",
    "save_params_csv",
    # Signal pairs
    "SignalPair",
    "find_time_origin",
    "load_signal_pair",
    "pair_file_paths",
]
