"""Route group exports."""

from . import health, links, timeline

__all__ = ["health", "links", "timeline"]
