"""Application lifecycle events."""

from safescan.core.events.lifespan import lifespan


__all__ = ["lifespan"]
