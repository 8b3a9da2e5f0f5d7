"""Binary weight and case file codecs."""

from .files import (
    convert_truth_table,
    read_cases,
    read_weights,
    write_cases,
    write_weights,
)

__all__ = [
    "convert_truth_table",
    "read_cases",
    "read_weights",
    "write_cases",
    "write_weights",
]
