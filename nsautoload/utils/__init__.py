"""Shared helpers for the CLI layer."""
