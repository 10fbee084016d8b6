"""Source-file readers."""
