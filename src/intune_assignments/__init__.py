"""Intune application assignment reports."""

__version__ = "0.1.0"
