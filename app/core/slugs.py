# app/core/slugs.py
import re
from typing import Any, Callable


def slugify(raw: str, fallback: str = "item") -> str:
    """
    Basic slugification:
      - lowercase
      - non-alphanumeric -> '-'
      - collapse multiple '-'
      - strip leading/trailing '-'
    """
    value = raw.strip().lower()
    value = re.sub(r"[^a-z0-9]+", "-", value)
    value = re.sub(r"-+", "-", value)
    value = value.strip("-")
    return value or fallback


def ensure_unique_slug(base_slug: str, lookup: Callable[[str], Any]) -> str:
    """
    Ensure slug is unique by appending -2, -3, ... if needed.

    `lookup(slug)` returns the existing row for a slug, or None.
    """
    slug = base_slug
    i = 2
    while lookup(slug) is not None:
        slug = f"{base_slug}-{i}"
        i += 1
    return slug
