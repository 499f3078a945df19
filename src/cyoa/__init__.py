"""Branching-dialogue story engine for the CYOA and conversation pages."""

__all__ = ["__version__"]

__version__ = "0.1.0"
