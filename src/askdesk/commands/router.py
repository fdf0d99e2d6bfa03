from __future__ import annotations

import shlex
from collections.abc import Awaitable, Callable

CommandHandler = Callable[[str], Awaitable[None]]


def command_name(command: str) -> str:
    trimmed = command.strip()
    if not trimmed.startswith("/") or len(trimmed) == 1:
        return ""
    return trimmed[1:].split(maxsplit=1)[0].lower()


def command_args(command: str) -> str:
    """Everything after the command word, with surrounding whitespace removed."""
    parts = command.strip().split(maxsplit=1)
    return parts[1].strip() if len(parts) == 2 else ""


def split_leading_argument(text: str) -> tuple[str, str]:
    """Split off the first shell-style token (which may be quoted) and return it with the raw remainder.

    Raises ValueError when the leading token has an unclosed quote.
    """
    lexer = shlex.shlex(text, posix=True)
    lexer.whitespace_split = True
    lexer.commenters = ""
    first = lexer.get_token() or ""
    return first, lexer.instream.read().strip()


class CommandRouter:
    def __init__(
        self,
        *,
        handlers: dict[str, CommandHandler],
        on_unknown: Callable[[str], None],
    ) -> None:
        self._handlers = {name.lower(): handler for name, handler in handlers.items()}
        self._on_unknown = on_unknown

    @property
    def command_names(self) -> list[str]:
        return sorted(self._handlers)

    async def try_handle(self, user_message: str) -> bool:
        trimmed = user_message.strip()
        if not trimmed.startswith("/"):
            return False

        handler = self._handlers.get(command_name(trimmed))
        if handler is None:
            self._on_unknown(trimmed)
            return True
        await handler(trimmed)
        return True
