"""Tymout discovery, search, recommendation and feedback API."""
__version__ = "1.0.0"
