"""Batch maintenance tasks for forum posts."""

__version__ = "0.1.0"
