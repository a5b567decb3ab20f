"""Comparison pipeline stages: diff, projection, classification, filtering."""
