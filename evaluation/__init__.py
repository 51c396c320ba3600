"""Deterministic evaluation scenarios for the matching pipeline."""
