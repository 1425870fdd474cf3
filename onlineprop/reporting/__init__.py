"""Reporting utilities for onlineprop."""

from .artifacts import load_weights, save_weights, write_manifest
from .metrics import CsvSink, JsonlSink
from .plots import plot_error_curves
from .summary import epoch_error_summary, write_summary

__all__ = [
    "write_manifest",
    "save_weights",
    "load_weights",
    "JsonlSink",
    "CsvSink",
    "plot_error_curves",
    "epoch_error_summary",
    "write_summary",
]
