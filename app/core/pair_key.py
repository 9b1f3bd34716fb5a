"""Conversation identity: the canonical key of an unordered pair of users."""

from __future__ import annotations

from typing import Tuple
from uuid import UUID

from app.constants.messages import PAIR_KEY_SEPARATOR


def build_pair_key(user_a: UUID, user_b: UUID) -> str:
    """
    Build a deterministic, order-independent key for two participants.

    Ids are rendered as hex and sorted, so A->B and B->A share one key:
    build_pair_key(a, b) == build_pair_key(b, a).
    """
    low, high = sorted((user_a.hex, user_b.hex))
    return f"{low}{PAIR_KEY_SEPARATOR}{high}"


def split_pair_key(pair_key: str) -> Tuple[UUID, UUID]:
    """Return the two participant ids of a key, in canonical order."""
    low, sep, high = pair_key.partition(PAIR_KEY_SEPARATOR)
    if not sep or not low or not high:
        raise ValueError(f"Malformed pair key: {pair_key!r}")
    return UUID(hex=low), UUID(hex=high)


def other_participant(pair_key: str, user_id: UUID) -> UUID:
    """Return the participant of `pair_key` that is not `user_id`."""
    first, second = split_pair_key(pair_key)
    if user_id == first:
        return second
    if user_id == second:
        return first
    raise ValueError(f"User {user_id} is not a participant of {pair_key!r}")
