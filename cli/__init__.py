"""Command line interface for Prompt Library."""
