"""Deckhand: symlink-based zero-downtime deployments driven by lifecycle events."""

__version__ = "1.0.0"
