"""Typed D-Bus values, in-memory messages, object paths and a proxy tree with property caching."""

__version__ = "0.1.0"