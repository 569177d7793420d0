"""CLI building blocks."""
