"""Timing, sequence numbering, statistics, buffering and congestion control for SRT."""

__version__ = "0.1.0"