"""Overlay sink adapters."""
