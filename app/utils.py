"""Utility helpers for the movie night service."""

from __future__ import annotations

import secrets

ROOM_CODE_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"
ROOM_CODE_LENGTH = 6


def generate_room_code(length: int = ROOM_CODE_LENGTH) -> str:
    """Return a random room code without easily confused characters."""

    return "".join(secrets.choice(ROOM_CODE_ALPHABET) for _ in range(length))


def normalize_room_code(value: str | None) -> str:
    """Return the canonical (trimmed, upper-case) form of a room code."""

    return (value or "").strip().upper()


def build_image_url(path: str | None, base_url: str) -> str:
    if not path:
        return ""
    if path.startswith("http"):
        return path
    return f"{base_url}{path}"


def unique_in_order(values, limit: int | None = None) -> list[str]:
    """Deduplicate values keeping first-seen order, optionally capped."""

    seen: list[str] = []
    for value in values:
        if not value or value in seen:
            continue
        seen.append(value)
        if limit is not None and len(seen) >= limit:
            break
    return seen
