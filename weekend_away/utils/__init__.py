"""Helpers shared by the CLI and tools."""
