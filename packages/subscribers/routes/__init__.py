"""Subscriber API routes."""

from packages.subscribers.routes import subscribers, diagnostics

__all__ = ["subscribers", "diagnostics"]
