"""Reporting utilities for stepprop."""

from .artifacts import write_manifest
from .metrics import CsvSink, JsonlSink
from .plots import TrainingPlot, plot_training
from .summary import write_summary

__all__ = ["write_manifest", "JsonlSink", "CsvSink", "TrainingPlot", "plot_training", "write_summary"]
