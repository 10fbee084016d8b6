"""Data loading and query services."""
