"""Asynchronous line server with factorial answers and delayed timer replies."""

from __future__ import annotations

import asyncio
import sys
from collections.abc import Sequence

from linesrv.echo_server import DEFAULT_HOST
from linesrv.factorial_server import (
    FactorialServer,
    _serve_main,
    factorial_u64,
    parse_leading_int,
)

TIMER_PREFIX = "таймер "
TIME_ERROR_REPLY = "Ошибка: Некорректное время\n"
INPUT_ERROR_REPLY = "Ошибка: Введите число или 'таймер N'\n"


def parse_timer_command(line: str) -> int | None:
    """Return the delay of a timer command, or None if ``line`` is not one.

    Raises ValueError when the line is a timer command without a positive
    number of seconds.
    """
    if not line.startswith(TIMER_PREFIX):
        return None
    seconds = parse_leading_int(line[len(TIMER_PREFIX):])
    if seconds <= 0:
        raise ValueError(f"timer delay must be positive: {seconds}")
    return seconds


def factorial_reply(line: str) -> str:
    """Return the factorial reply for a line that is not a timer command."""
    try:
        number = parse_leading_int(line)
    except ValueError:
        return INPUT_ERROR_REPLY
    return f"Факториал: {factorial_u64(number)}\n"


class TimerServer(FactorialServer):
    """TCP server answering numbers with factorials and timer commands after a delay."""

    def __init__(self, host: str = DEFAULT_HOST, port: int = 0) -> None:
        super().__init__(host, port)

    async def start(self):
        """Start listening for connections."""
        return await super().start()

    async def close(self) -> None:
        """Stop listening and drop every connection."""
        await super().close()

    async def handle(self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter) -> None:
        """Answer each received line until the client disconnects."""
        await super().handle(reader, writer)

    async def _reply_for(self, line: str) -> str:
        try:
            seconds = parse_timer_command(line)
        except ValueError:
            return TIME_ERROR_REPLY
        if seconds is None:
            return factorial_reply(line)
        await asyncio.sleep(seconds)
        return f"Прошло {seconds} секунд!\n"


def main(argv: Sequence[str] | None = None) -> int:
    return _serve_main(TimerServer, "Answer factorials and timer commands.", "Ошибка", argv)


if __name__ == "__main__":
    sys.exit(main())