"""Documentation generator for XMIR artifacts."""

__version__ = "0.1.0"
