"""Implementations of ``ikat`` CLI commands."""
