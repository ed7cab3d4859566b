"""Lounge command API: the HTTP face of handle_command."""
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from lounge.handler import handle_command
from lounge.models.base import async_session_factory

logger = logging.getLogger("lounge.api")

router = APIRouter(prefix="/api", tags=["bot"])


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Dependency: session factory for the lounge store (overridden in tests)."""
    return async_session_factory


class CommandRequest(BaseModel):
    user_id: int = Field(alias="userId", ge=-(2**63), le=2**63 - 1)
    username: str = ""
    command: str
    args: list[str] = []


class CommandResponse(BaseModel):
    response: str


@router.get("/health")
async def health():
    """Health check."""
    return {"status": "ok"}


@router.post("/bot/command", response_model=CommandResponse)
async def bot_command(
    body: CommandRequest,
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
):
    """Run one lounge command (or chat line) for the given user."""
    command_line = " ".join([body.command, *body.args])
    logger.debug("Command from %s: %s", body.user_id, body.command)
    response = await handle_command(body.user_id, body.username, command_line, session_factory)
    return CommandResponse(response=response)
