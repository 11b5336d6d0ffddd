"""Adapters for external sources and report formats."""
