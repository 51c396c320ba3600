"""Jewel matcher application wiring: configuration, logging and app bootstrap."""
