"""XS Notify — relays desktop notifications to an XSOverlay display."""

__version__ = "1.1.0"
