"""Command line interface for stepprop."""
