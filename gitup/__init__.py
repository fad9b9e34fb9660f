"""gitup: install Git and manage the global Git identity."""

__version__ = "0.3.0"
