"""Rank checks for staff commands."""
from __future__ import annotations

from lounge.errors import AuthorizationError, BannedError
from lounge.levels import Rank
from lounge.models import User


def ensure_not_banned(user: User) -> None:
    if user.banned:
        raise BannedError()


def has_mod_or_higher(user: User) -> bool:
    """True if user is a Moderator or Admin."""
    return user.rank >= Rank.MODERATOR


def has_admin(user: User) -> bool:
    """True if user is an Admin."""
    return user.rank >= Rank.ADMIN


def require_moderator(user: User) -> User:
    """Require moderator or admin rank. Raises AuthorizationError if insufficient."""
    if not has_mod_or_higher(user):
        raise AuthorizationError("🚫 Staff only: this command needs Moderator rank or higher.")
    return user


def require_admin(user: User) -> User:
    """Require admin rank. Raises AuthorizationError if insufficient."""
    if not has_admin(user):
        raise AuthorizationError("🚫 Admin only: this command needs Admin rank.")
    return user
