"""Command-line interface for dcurve."""
