"""Request handler: the single entry point for lounge commands."""
from __future__ import annotations

import asyncio
import logging
import weakref
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from lounge.checks import ensure_not_banned
from lounge.commands import CommandContext, dispatch, format_chat, in_int_range, split_command
from lounge.errors import ArgumentParseError, CommandError
from lounge.models import base
from lounge.store import LoungeStore

logger = logging.getLogger("lounge")

FAILURE_RESPONSE = "⚠️ Something went wrong. Please try again later."

# One command at a time against the store, per event loop.
_command_locks: "weakref.WeakKeyDictionary[asyncio.AbstractEventLoop, asyncio.Lock]" = weakref.WeakKeyDictionary()


def _command_lock() -> asyncio.Lock:
    loop = asyncio.get_running_loop()
    lock = _command_locks.get(loop)
    if lock is None:
        lock = _command_locks[loop] = asyncio.Lock()
    return lock


async def handle_command(
    caller_id: int,
    caller_username: str,
    command_line: str,
    session_factory: Optional[async_sessionmaker[AsyncSession]] = None,
) -> str:
    """Run one command line for a caller and return the reply text.

    The caller row is created on first contact. A banned caller gets the
    access-denied reply and nothing else happens. All reads and writes of one
    call share a single transaction.
    """
    if not in_int_range(caller_id):
        logger.warning("Rejected out-of-range caller id %s", caller_id)
        return ArgumentParseError("caller id", str(caller_id), out_of_range=True).message
    factory = session_factory or base.async_session_factory
    async with _command_lock():
        try:
            async with factory() as session:
                async with session.begin():
                    return await _run(LoungeStore(session), caller_id, caller_username, command_line)
        except SQLAlchemyError:
            logger.exception("Store failure handling command from %s", caller_id)
            return FAILURE_RESPONSE


async def _run(store: LoungeStore, caller_id: int, caller_username: str, command_line: str) -> str:
    user = await store.get_or_create_user(caller_id, caller_username)
    try:
        ensure_not_banned(user)
        parsed = split_command(command_line)
        if parsed is None:
            return format_chat(user, command_line)
        name, args = parsed
        return await dispatch(name, CommandContext(user=user, args=args, store=store))
    except CommandError as e:
        logger.debug("Command rejected for %s: %s", caller_id, e.message)
        return e.message
