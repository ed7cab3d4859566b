"""Domain errors for lounge commands. The message is what the caller sees."""
from __future__ import annotations


class CommandError(Exception):
    """Base class: a rejected command. Never leaves a partial write behind."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class UnknownCommandError(CommandError):
    def __init__(self, message: str = "❓ Unknown command. Type /help for the list.") -> None:
        super().__init__(message)


class ValidationError(CommandError):
    """Malformed arguments or a missing prerequisite (join, nickname)."""


class ArgumentParseError(ValidationError):
    """An argument that must be an integer is not one, or is out of range."""

    def __init__(self, name: str, value: str | None, out_of_range: bool = False) -> None:
        if value is None:
            message = f"❌ Missing {name}."
        elif out_of_range:
            message = f"❌ {name.capitalize()} is out of range, got '{value}'."
        else:
            message = f"❌ {name.capitalize()} must be a whole number, got '{value}'."
        super().__init__(message)
        self.name = name
        self.value = value


class NotFoundError(CommandError):
    pass


class StateConflictError(CommandError):
    pass


class AuthorizationError(CommandError):
    pass


class BannedError(CommandError):
    def __init__(self, message: str = "⛔ Access denied: you are banned from the lounge.") -> None:
        super().__init__(message)
