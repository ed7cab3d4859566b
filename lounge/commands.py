"""Command dispatcher: one coroutine per lounge command.

Every command receives a resolved caller and the store, validates all of its
arguments first, and only then writes. A rejected command raises a
``CommandError`` subclass whose message becomes the reply.
"""
from __future__ import annotations

import logging
import secrets
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional

import config
from lounge.checks import has_mod_or_higher, require_admin, require_moderator
from lounge.errors import (
    ArgumentParseError,
    NotFoundError,
    StateConflictError,
    UnknownCommandError,
    ValidationError,
)
from lounge.levels import Rank, level_for, rank_name, reaction_weight
from lounge.models import Poll, User
from lounge.store import LoungeStore

logger = logging.getLogger("lounge.commands")


@dataclass
class CommandContext:
    """What a command sees: the caller, its arguments and the store."""

    user: User
    args: list[str]
    store: LoungeStore


CommandFunc = Callable[[CommandContext], Awaitable[str]]

COMMANDS: dict[str, CommandFunc] = {}
DEBUG_COMMANDS: dict[str, CommandFunc] = {}


def command(*names: str, debug: bool = False) -> Callable[[CommandFunc], CommandFunc]:
    """Register a coroutine under one or more command names."""

    def decorator(func: CommandFunc) -> CommandFunc:
        table = DEBUG_COMMANDS if debug else COMMANDS
        for name in names:
            table[name] = func
        return func

    return decorator


def resolve(name: str) -> CommandFunc:
    """Look up a command by name. Debug commands only exist while the flag is on."""
    func = COMMANDS.get(name)
    if func is None and config.ENABLE_DEBUG_COMMANDS:
        func = DEBUG_COMMANDS.get(name)
    if func is None:
        raise UnknownCommandError()
    return func


async def dispatch(name: str, ctx: CommandContext) -> str:
    return await resolve(name)(ctx)


# Store integer columns are signed 64-bit.
INT_MIN = -(2**63)
INT_MAX = 2**63 - 1


def in_int_range(value: int) -> bool:
    return INT_MIN <= value <= INT_MAX


def parse_int(args: list[str], index: int, name: str) -> int:
    """Integer argument at position ``index``. Missing, non-numeric or out-of-range raises ArgumentParseError."""
    if index >= len(args):
        raise ArgumentParseError(name, None)
    raw = args[index]
    try:
        value = int(raw)
    except ValueError:
        raise ArgumentParseError(name, raw) from None
    if not in_int_range(value):
        raise ArgumentParseError(name, raw, out_of_range=True)
    return value


def display_name(user: User) -> str:
    return user.nickname or user.username or f"User {user.id}"


def format_poll_results(poll: Poll) -> str:
    counts = poll.tally()
    return "\n".join(
        f"{i}. {option}: {count}" for i, (option, count) in enumerate(zip(poll.options, counts), start=1)
    )


HELP_TEXT = (
    "📖 Commands\n"
    "/join - join the lounge\n"
    "/leave - leave the lounge\n"
    "/nick [name] - show or set your nickname\n"
    "/tripcode - toggle your tripcode\n"
    "/info - your profile\n"
    "/level - your level and karma\n"
    "/users - how many users are in the lounge\n"
    "/poll Question | Opt1 | Opt2 - create a poll\n"
    "/vote <pollId> <option> - vote in a poll\n"
    "/endpoll <pollId> - close a poll\n"
    "/react up|down [userId] - give or take karma\n"
    "/motd <text> - set the message of the day (staff)\n"
    "/ban <userId> - ban a user (staff)\n"
    "/promote <userId> - make a user Moderator (admin)"
)


# Membership and identity


@command("join")
async def join(ctx: CommandContext) -> str:
    ctx.user.joined = True
    await ctx.store.session.flush()
    motd = await ctx.store.get_setting("motd")
    response = "👋 Welcome to the lounge!"
    if motd:
        response += f"\n📌 MOTD: {motd}"
    return response


@command("leave")
async def leave(ctx: CommandContext) -> str:
    ctx.user.joined = False
    await ctx.store.session.flush()
    return "👋 You left the lounge. Use /join to come back."


@command("help")
async def help_(ctx: CommandContext) -> str:
    return HELP_TEXT


@command("info")
async def info(ctx: CommandContext) -> str:
    user = ctx.user
    return (
        "👤 Profile\n"
        f"ID: {user.id}\n"
        f"Rank: {rank_name(user.rank)}\n"
        f"Level: {level_for(user.karma)}\n"
        f"Karma: {user.karma}\n"
        f"Tripcode: {user.tripcode or 'None'}"
    )


@command("nick")
async def nick(ctx: CommandContext) -> str:
    new_nick = " ".join(ctx.args).strip()
    if not new_nick:
        if ctx.user.nickname:
            return f"Your current nick is: {ctx.user.nickname}"
        return "You don't have a nickname set."
    ctx.user.nickname = new_nick
    await ctx.store.session.flush()
    return f"✅ Nickname set to: {new_nick}"


@command("tripcode")
async def tripcode(ctx: CommandContext) -> str:
    if ctx.user.tripcode:
        ctx.user.tripcode = None
        await ctx.store.session.flush()
        return "🔓 Tripcode removed."
    ctx.user.tripcode = secrets.token_hex(5)
    await ctx.store.session.flush()
    return f"🔐 Tripcode enabled: !{ctx.user.tripcode}"


@command("level", "rank")
async def level(ctx: CommandContext) -> str:
    return f"📊 Level: {level_for(ctx.user.karma)}\n✨ Karma: {ctx.user.karma}"


@command("users")
async def users(ctx: CommandContext) -> str:
    count = await ctx.store.count_joined_users()
    return f"👥 Users in the lounge: {count}"


# Polls


@command("poll")
async def poll(ctx: CommandContext) -> str:
    parts = [p.strip() for p in " ".join(ctx.args).split("|")]
    if len(parts) < 3 or not all(parts):
        raise ValidationError("❌ Usage: /poll Question | Opt1 | Opt2")
    question, options = parts[0], parts[1:]
    created = await ctx.store.create_poll(question, options, ctx.user.id)
    lines = [f"🗳️ Poll Created (ID: {created.id})", f"Q: {question}"]
    lines.extend(f"{i}. {option}" for i, option in enumerate(options, start=1))
    return "\n".join(lines)


@command("vote")
async def vote(ctx: CommandContext) -> str:
    poll_id = parse_int(ctx.args, 0, "poll id")
    option_number = parse_int(ctx.args, 1, "option number")
    target = await ctx.store.get_poll(poll_id)
    if target is None:
        raise NotFoundError("❌ Poll not found.")
    if target.closed:
        raise StateConflictError("❌ Poll is closed.")
    if not 1 <= option_number <= len(target.options):
        raise ValidationError(f"❌ Option must be between 1 and {len(target.options)}.")
    await ctx.store.record_vote(target, ctx.user.id, option_number - 1)
    return "✅ Vote registered!"


@command("endpoll")
async def endpoll(ctx: CommandContext) -> str:
    poll_id = parse_int(ctx.args, 0, "poll id")
    target = await ctx.store.get_poll(poll_id)
    if target is None:
        raise NotFoundError("❌ Poll not found.")
    if target.creator_id != ctx.user.id:
        require_moderator(ctx.user)
    if target.closed:
        raise StateConflictError("❌ Poll is already closed.")
    await ctx.store.close_poll(target)
    logger.info("Poll %s closed by %s", target.id, ctx.user.id)
    return f"🔒 Poll {target.id} closed.\nQ: {target.question}\n{format_poll_results(target)}"


# Karma


@command("react")
async def react(ctx: CommandContext) -> str:
    direction = ctx.args[0] if ctx.args else ""
    if direction not in ("up", "down"):
        raise ValidationError("❌ Usage: /react up|down [userId]")
    if len(ctx.args) > 1:
        target = await ctx.store.get_user(parse_int(ctx.args, 1, "user id"))
        if target is None:
            raise NotFoundError("❌ User not found.")
    else:
        target = ctx.user
    weight = reaction_weight(ctx.user.rank)
    delta = weight if direction == "up" else -weight
    karma = await ctx.store.add_karma(target, delta)
    icon = "👍" if delta > 0 else "👎"
    return f"{icon} {display_name(target)} karma {delta:+d} (now {karma})"


# Staff


@command("motd")
async def motd(ctx: CommandContext) -> str:
    require_moderator(ctx.user)
    text = " ".join(ctx.args).strip()
    if not text:
        raise ValidationError("❌ Usage: /motd <text>")
    await ctx.store.set_setting("motd", text)
    logger.info("MOTD set by %s", ctx.user.id)
    return f"📌 MOTD updated: {text}"


@command("ban")
async def ban(ctx: CommandContext) -> str:
    require_moderator(ctx.user)
    target_id = parse_int(ctx.args, 0, "user id")
    target = await ctx.store.get_user(target_id)
    if target is None:
        raise NotFoundError("❌ User not found.")
    target.banned = True
    await ctx.store.session.flush()
    logger.info("User %s banned by %s", target_id, ctx.user.id)
    return f"🔨 User {target_id} has been banned."


@command("promote")
async def promote(ctx: CommandContext) -> str:
    require_admin(ctx.user)
    target_id = parse_int(ctx.args, 0, "user id")
    target = await ctx.store.get_user(target_id)
    if target is None:
        raise NotFoundError("❌ User not found.")
    if has_mod_or_higher(target):
        raise StateConflictError(f"❌ User {target_id} is already {rank_name(target.rank)}.")
    target.rank = Rank.MODERATOR
    await ctx.store.session.flush()
    logger.info("User %s promoted to Moderator by %s", target_id, ctx.user.id)
    return f"⭐ User {target_id} promoted to Moderator."


# Debug (only with ENABLE_DEBUG_COMMANDS)


@command("add_karma", debug=True)
async def add_karma(ctx: CommandContext) -> str:
    amount = parse_int(ctx.args, 0, "amount") if ctx.args else 1
    if not in_int_range(ctx.user.karma + amount):
        raise ValidationError("❌ Karma would go out of range.")
    await ctx.store.add_karma(ctx.user, amount)
    logger.info("Debug: %s added %d karma", ctx.user.id, amount)
    return f"➕ Added {amount} karma."


@command("setrank", debug=True)
async def setrank(ctx: CommandContext) -> str:
    target_id = parse_int(ctx.args, 0, "user id")
    new_rank = parse_int(ctx.args, 1, "rank")
    if new_rank not in tuple(Rank):
        raise ValidationError("❌ Rank must be 0 (User), 1 (Moderator) or 2 (Admin).")
    target = await ctx.store.get_user(target_id)
    if target is None:
        raise NotFoundError("❌ User not found.")
    target.rank = new_rank
    await ctx.store.session.flush()
    logger.info("Debug: %s set rank of %s to %d", ctx.user.id, target_id, new_rank)
    return f"🔧 User {target_id} rank set to {rank_name(new_rank)}."


# Plain chat


def format_chat(user: User, text: str) -> str:
    """Chat line for a non-command message. Requires a joined caller with a nickname."""
    if not user.joined:
        raise ValidationError("❌ You are not in the lounge. Use /join first.")
    if not user.nickname:
        raise ValidationError("❌ Set a nickname with /nick before chatting.")
    text = text.strip()
    if not text:
        raise ValidationError("❌ Empty message.")
    signature = f" !{user.tripcode}" if user.tripcode else ""
    return f"💬 {user.nickname}{signature}: {text}"


def split_command(line: str, prefixes: Optional[set[str]] = None) -> Optional[tuple[str, list[str]]]:
    """Split a command line into (name, args). None if the line is not a command."""
    tokens = line.split()
    if not tokens:
        return None
    head = tokens[0]
    for prefix in sorted(prefixes or config.COMMAND_PREFIXES, key=len, reverse=True):
        if head.startswith(prefix):
            return head[len(prefix):], tokens[1:]
    return None
