"""Path and attachment helpers."""
