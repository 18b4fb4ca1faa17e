"""Injection-point coordinate mapping and anatomical validation."""

__version__ = "1.0.0"
