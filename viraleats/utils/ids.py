"""Identifier and slug helpers shared by models and lookups."""

from __future__ import annotations

import re
import uuid


def new_id() -> str:
    """Opaque string id for new rows."""
    return str(uuid.uuid4())


def to_slug(name: str) -> str:
    """
    URL-friendly slug: lower-case, runs of non-alphanumerics collapsed to '-',
    leading/trailing dashes removed. Used as the TripAdvisor cache key.
    """
    slug = re.sub(r"[^a-z0-9]+", "-", name.lower())
    return slug.strip("-")
