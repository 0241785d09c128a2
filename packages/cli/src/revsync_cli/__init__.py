"""Command line interface for revsync."""
