"""Command-line interface for Queryly."""
