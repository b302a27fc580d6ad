"""Command-line interface for dmapcodec."""
