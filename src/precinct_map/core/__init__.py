"""Core configuration, logging, database, and background job helpers."""
