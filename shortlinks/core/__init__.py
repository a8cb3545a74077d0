"""Core module for the short link registry service."""

from shortlinks.core.config import settings

__all__ = ["settings"]
