"""Notification source adapters."""
