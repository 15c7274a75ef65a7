"""Templating — kida environment creation and per-request binding."""
