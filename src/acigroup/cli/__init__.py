"""Command-line interface for acigroup."""
