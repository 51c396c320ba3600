"""Matching engine: color classification, filtering, relaxation and scoring."""
