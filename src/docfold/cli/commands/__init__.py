"""Top-level commands."""
