"""Reporting utilities for spreadnet."""

from .console import dump_truth_table, dump_weights, echo_config, format_report, format_topology
from .metrics import CsvSink, JsonlSink

__all__ = [
    "CsvSink",
    "JsonlSink",
    "dump_truth_table",
    "dump_weights",
    "echo_config",
    "format_report",
    "format_topology",
]
