"""Chat-triggered webhook commands with a schema-driven argument parser."""

__version__ = "0.1.0"
