"""Git integration."""

from .repository import TagRepository, parse_tag_listing

__all__ = ["TagRepository", "parse_tag_listing"]
