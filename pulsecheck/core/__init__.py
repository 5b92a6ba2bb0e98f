"""Core cross-cutting utilities."""
