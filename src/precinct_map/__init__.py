"""Precinct map API — precinct boundaries and election results for a browser map."""
