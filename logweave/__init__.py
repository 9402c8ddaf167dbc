"""Hierarchical loggers, filters, writers and pattern/JSON encoders for log records."""

__version__ = "0.1.0"

__all__ = [
    "record",
    "style",
    "filters",
    "writers",
    "pattern_parser",
    "alignment",
    "chunks",
    "pattern",
    "json_encoder",
    "logger",
]