"""Typed, profile-based settings store for the filer file manager."""

__version__ = "0.1.0"
