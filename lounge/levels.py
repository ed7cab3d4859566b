"""Karma levels and rank weights."""
from __future__ import annotations

from enum import IntEnum


class Rank(IntEnum):
    USER = 0
    MODERATOR = 1
    ADMIN = 2


RANK_NAMES = {
    Rank.USER: "User",
    Rank.MODERATOR: "Moderator",
    Rank.ADMIN: "Admin",
}

# (minimum karma, name). Order here does not matter; see _LEVELS_DESC.
LEVELS = (
    (0, "🔰 Newcomer"),
    (10, "🌱 Initiate"),
    (25, "📜 Learner"),
    (50, "🔍 Seeker"),
    (100, "🛡️ Guardian"),
)

# Computed once, never mutated.
_LEVELS_DESC = tuple(sorted(LEVELS, key=lambda level: level[0], reverse=True))
_LOWEST_LEVEL = _LEVELS_DESC[-1]

REACTION_WEIGHTS = {
    Rank.USER: 1,
    Rank.MODERATOR: 5,
    Rank.ADMIN: 10,
}


def level_for(karma: int) -> str:
    """Name of the highest level whose minimum is <= karma (lowest level for anything below)."""
    for minimum, name in _LEVELS_DESC:
        if karma >= minimum:
            return name
    return _LOWEST_LEVEL[1]


def reaction_weight(rank: int) -> int:
    """Karma a reaction from a caller of this rank is worth. Unknown ranks count as 1."""
    return REACTION_WEIGHTS.get(rank, 1)


def rank_name(rank: int) -> str:
    """Display name for a rank value. Unknown values are shown as User."""
    return RANK_NAMES.get(rank, RANK_NAMES[Rank.USER])
