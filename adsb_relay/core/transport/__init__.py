"""Transport layer - Fuentes de líneas del feed."""

from .feed_client import FeedClient, iter_text_lines

__all__ = ["FeedClient", "iter_text_lines"]
