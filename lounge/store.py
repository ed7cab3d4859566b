"""Persistent store: users, polls and settings over one AsyncSession.

The store never commits. The caller owns the transaction, so everything a
single command does is applied together or not at all.
"""
from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from lounge.models import Poll, Setting, User

logger = logging.getLogger("lounge.store")

DEFAULTS = {
    "motd": "",
}


class LoungeStore:
    """Row access for the command dispatcher."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    # Users

    async def get_user(self, user_id: int) -> Optional[User]:
        return await self.session.get(User, user_id)

    async def get_or_create_user(self, user_id: int, username: str) -> User:
        """Return the user with this id, creating it with defaults on first contact."""
        user = await self.session.get(User, user_id)
        if user is None:
            user = User(
                id=user_id,
                username=username,
                karma=0,
                rank=0,
                banned=False,
                joined=True,
            )
            self.session.add(user)
            await self.session.flush()
            logger.info("New user %s (%s)", user_id, username)
        return user

    async def count_joined_users(self) -> int:
        result = await self.session.execute(
            select(func.count()).select_from(User).where(User.joined.is_(True))
        )
        return int(result.scalar_one())

    async def add_karma(self, user: User, delta: int) -> int:
        user.karma = (user.karma or 0) + delta
        await self.session.flush()
        return user.karma

    # Polls

    async def get_poll(self, poll_id: int) -> Optional[Poll]:
        return await self.session.get(Poll, poll_id)

    async def create_poll(self, question: str, options: list[str], creator_id: int) -> Poll:
        poll = Poll(question=question, options=list(options), votes={}, closed=False, creator_id=creator_id)
        self.session.add(poll)
        await self.session.flush()
        return poll

    async def record_vote(self, poll: Poll, user_id: int, option_index: int) -> None:
        """Record or overwrite a user's vote. New dict so the JSON column is marked dirty."""
        votes = dict(poll.votes or {})
        votes[str(user_id)] = option_index
        poll.votes = votes
        await self.session.flush()

    async def close_poll(self, poll: Poll) -> None:
        poll.closed = True
        await self.session.flush()

    # Settings

    async def get_setting(self, key: str) -> str:
        row = await self.session.get(Setting, key)
        return row.value if row else DEFAULTS.get(key, "")

    async def set_setting(self, key: str, value: str) -> None:
        row = await self.session.get(Setting, key)
        if row:
            row.value = value
        else:
            self.session.add(Setting(key=key, value=value))
        await self.session.flush()
