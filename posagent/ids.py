"""Identifier helpers."""

from __future__ import annotations

import uuid


def new_uuid_v4() -> str:
    """Return a random version 4 UUID in canonical 8-4-4-4-12 lower-case form."""
    return str(uuid.uuid4())