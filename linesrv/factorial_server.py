"""Asynchronous line server that answers each number with its factorial."""

from __future__ import annotations

import asyncio
import math
import re
import socket
import sys
from collections.abc import AsyncIterator, Callable, Sequence
from contextlib import asynccontextmanager, suppress

from linesrv.echo_server import (
    DEFAULT_HOST,
    DEFAULT_PORT,
    ENCODING,
    ERRORS,
    _address_parser,
)

INT_MIN = -(2**31)
INT_MAX = 2**31 - 1
U64_MODULUS = 1 << 64
ERROR_REPLY = "Error: Invalid input\n"

# 66! is the first factorial with at least 64 factors of two, so it and every
# later one wrap to zero in 64-bit unsigned arithmetic.
_WRAPS_TO_ZERO_FROM = 66

_LEADING_INT = re.compile(r"[ \t\n\v\f\r]*([+-]?[0-9]+)", re.ASCII)


def parse_leading_int(text: str) -> int:
    """Parse the integer at the start of ``text`` as a 32-bit signed value.

    Leading whitespace is skipped and trailing text is ignored. Raises
    ValueError when there is no number or it does not fit.
    """
    match = _LEADING_INT.match(text)
    if match is None:
        raise ValueError(f"invalid integer: {text!r}")
    value = int(match.group(1))
    if not INT_MIN <= value <= INT_MAX:
        raise ValueError(f"integer out of range: {match.group(1)}")
    return value


def factorial_u64(n: int) -> int:
    """Return n! reduced modulo 2**64; values below 2 give 1."""
    if n >= _WRAPS_TO_ZERO_FROM:
        return 0
    return math.factorial(max(n, 0)) % U64_MODULUS


def respond(line: str) -> str:
    """Return the reply for one received line."""
    try:
        number = parse_leading_int(line)
    except ValueError:
        return ERROR_REPLY
    return f"Factorial: {factorial_u64(number)}\n"


class FactorialServer:
    """TCP server answering every received line with a factorial."""

    def __init__(self, host: str = DEFAULT_HOST, port: int = DEFAULT_PORT) -> None:
        self.host = host
        self.port = port
        self._server: asyncio.AbstractServer | None = None
        self._tasks: set[asyncio.Task] = set()

    async def start(self) -> int:
        """Start listening and return the bound port."""
        self._server = await asyncio.start_server(
            self.handle, self.host, self.port, family=socket.AF_INET
        )
        self.port = self._server.sockets[0].getsockname()[1]
        return self.port

    async def _serve_forever(self) -> None:
        await self.start()
        try:
            await self._server.serve_forever()
        finally:
            await self.close()

    async def close(self) -> None:
        """Stop listening and drop every open connection."""
        if self._server is None:
            return
        self._server.close()
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        await self._server.wait_closed()
        self._server = None

    @asynccontextmanager
    async def _session(self, writer: asyncio.StreamWriter) -> AsyncIterator[None]:
        """Track the running handler and close ``writer`` when it ends."""
        task = asyncio.current_task()
        self._tasks.add(task)
        try:
            yield
        finally:
            self._tasks.discard(task)
            writer.close()
            with suppress(OSError, asyncio.CancelledError):
                await writer.wait_closed()

    async def _reply_for(self, line: str) -> str:
        return respond(line)

    async def handle(self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter) -> None:
        """Serve one connection until the peer stops sending whole lines."""
        async with self._session(writer):
            with suppress(ConnectionError):
                while True:
                    try:
                        raw = await reader.readuntil(b"\n")
                    except (asyncio.IncompleteReadError, asyncio.LimitOverrunError):
                        break
                    reply = await self._reply_for(raw.decode(ENCODING, ERRORS))
                    writer.write(reply.encode(ENCODING, ERRORS))
                    await writer.drain()


def _serve_main(
    server_cls: Callable[[str, int], FactorialServer],
    description: str,
    error_label: str,
    argv: Sequence[str] | None,
) -> int:
    args = _address_parser(description).parse_args(argv)
    try:
        asyncio.run(server_cls(args.host, args.port)._serve_forever())
    except KeyboardInterrupt:
        pass
    except OSError as exc:
        print(f"{error_label}: {exc}", file=sys.stderr)
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    return _serve_main(FactorialServer, "Answer numbers with their factorials.", "Exception", argv)


if __name__ == "__main__":
    sys.exit(main())