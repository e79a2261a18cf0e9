"""Command-line interface for dirloader."""
