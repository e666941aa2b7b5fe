"""Logging helpers for htmltrim."""
