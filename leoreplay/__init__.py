"""Emulated link queues, TLS socket helpers, Apache replay configuration and live graphs."""

__version__ = "0.1.0"