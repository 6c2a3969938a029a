"""Reaction reconciliation shared by comment, reply and poll votes.

A voter holds at most one stance per subject. Reacting with no stance on
record creates one, repeating the current stance withdraws it, and reacting
differently replaces it in place.
"""
from __future__ import annotations

import enum
from collections.abc import Hashable, Mapping
from typing import Any, TypeVar

from talent_radar.core.exceptions import InvalidRequestError

__all__ = [
    "ReactionChange",
    "reconcile",
    "counter_deltas",
    "increment",
    "apply_increments",
    "require",
]

T = TypeVar("T", bound=Hashable)


class ReactionChange(enum.Enum):
    CREATED = "created"
    CHANGED = "changed"
    REMOVED = "removed"


def reconcile(current: T | None, requested: T) -> ReactionChange:
    """Decide what a new reaction does to the voter's current stance."""
    if current is None:
        return ReactionChange.CREATED
    if current == requested:
        return ReactionChange.REMOVED
    return ReactionChange.CHANGED


def counter_deltas(change: ReactionChange, current: T | None, requested: T) -> dict[T, int]:
    """Return the per-type counter adjustments implied by ``change``.

    >>> counter_deltas(ReactionChange.CHANGED, "up", "down")
    {'up': -1, 'down': 1}
    """
    if change is ReactionChange.REMOVED:
        return {requested: -1}
    if change is ReactionChange.CHANGED and current is not None:
        return {current: -1, requested: 1}
    return {requested: 1}


def increment(entity: Any, attribute: str, delta: int) -> None:
    """Queue an atomic ``column = column + delta`` update on a persistent row.

    The attribute is expired after the next flush, so reading it afterwards
    returns the value the database computed.
    """
    if delta == 0:
        return
    column = getattr(type(entity), attribute)
    setattr(entity, attribute, column + delta)


def apply_increments(entity: Any, columns: Mapping[T, str], deltas: Mapping[T, int]) -> None:
    for key, delta in deltas.items():
        increment(entity, columns[key], delta)


def require(**arguments: object) -> None:
    """Reject missing arguments before any lookup happens."""
    missing = [name for name, value in arguments.items() if value is None]
    if missing:
        raise InvalidRequestError(
            message=f"Missing required argument(s): {', '.join(sorted(missing))}",
        )
