"""Scaled score service for the national numeracy/literacy progressions."""

__version__ = "0.1.0"
