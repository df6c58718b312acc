"""Command-line interface for enhancerepo."""
