"""Typed values, date, time and XML wire encodings, and result-stream handling for the TDS protocol."""

__version__ = "0.1.0"