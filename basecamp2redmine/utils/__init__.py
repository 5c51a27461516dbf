"""Utility helpers for text handling, filtering and validation."""
