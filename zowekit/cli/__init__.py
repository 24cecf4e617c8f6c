"""Command-line interface for zowekit."""
