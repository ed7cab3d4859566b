"""Database models."""
from lounge.models.base import Base, init_db
from lounge.models.poll import Poll
from lounge.models.setting import Setting
from lounge.models.user import User

__all__ = [
    "Base",
    "Poll",
    "Setting",
    "User",
    "init_db",
]
