"""Command-line interface for lock-scan."""
