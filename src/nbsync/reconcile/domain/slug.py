"""Slug generation matching the URL-safe slugs NetBox accepts."""

import re

SLUG_MAX_LENGTH = 100

_INVALID = re.compile(r"[^a-z0-9_]+")


def slugify(value: str, max_length: int = SLUG_MAX_LENGTH) -> str:
    """Build a slug from a display name.

    Lowercases, replaces every run of characters outside ``[a-z0-9_]`` with a
    single hyphen, trims hyphens from both ends, and truncates.

    Example:
        >>> slugify("Catalyst 9300 / 24P")
        'catalyst-9300-24p'
    """
    slug = _INVALID.sub("-", value.strip().lower()).strip("-")
    return slug[:max_length].rstrip("-")
