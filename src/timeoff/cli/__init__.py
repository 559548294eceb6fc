"""Command line interface for timeoff."""
