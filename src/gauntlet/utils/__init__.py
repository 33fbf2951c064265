"""Shared helpers: logging and numeric utilities."""
