"""Asynchronous server answering one request per connection, with an idle timeout."""

from __future__ import annotations

import asyncio
import os
import sys
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor
from contextlib import suppress

from linesrv.echo_server import DEFAULT_HOST, ENCODING, ERRORS
from linesrv.factorial_server import FactorialServer, factorial_u64, parse_leading_int

DEFAULT_TIMEOUT = 10.0
MAX_LENGTH = 1024
ERROR_REPLY = "Ошибка: некорректный ввод"
READ_ERROR_PREFIX = "Ошибка чтения: "


def handle_request(request: str) -> str:
    """Return the reply text, without newline, for one received request."""
    try:
        number = parse_leading_int(request)
    except ValueError:
        return ERROR_REPLY
    return f"Факториал {number} = {factorial_u64(number)}"


async def _discard_until_eof(reader: asyncio.StreamReader) -> None:
    while await reader.read(MAX_LENGTH):
        pass


class PoolServer(FactorialServer):
    """TCP server computing factorials in a worker pool and logging the results.

    Each connection is answered once; it is closed when ``timeout`` seconds
    have passed since it was accepted.
    """

    def __init__(
        self,
        host: str = DEFAULT_HOST,
        port: int = 0,
        workers: int = 1,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        if workers < 1:
            raise ValueError(f"workers must be at least 1, got {workers}")
        super().__init__(host, port)
        self.workers = workers
        self.timeout = timeout
        self.log: list[str] = []
        self._executor = ThreadPoolExecutor(max_workers=workers)

    async def start(self):
        """Start listening for connections."""
        return await super().start()

    async def close(self) -> None:
        """Stop listening, drop every connection and shut the worker pool down."""
        await super().close()
        self._executor.shutdown(wait=False)

    async def handle(self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter) -> None:
        """Answer one request on the connection and close it at the deadline."""
        loop = asyncio.get_running_loop()
        deadline = loop.time() + self.timeout
        async with self._session(writer):
            try:
                try:
                    data = await asyncio.wait_for(reader.read(MAX_LENGTH), self.timeout)
                except asyncio.TimeoutError:
                    self.log.append(f"{READ_ERROR_PREFIX}Operation canceled")
                    return
                if not data:
                    self.log.append(f"{READ_ERROR_PREFIX}End of file")
                    return
                request = data.decode(ENCODING, ERRORS)
                reply = await loop.run_in_executor(self._executor, handle_request, request)
                if reply != ERROR_REPLY:
                    self.log.append(reply)
                writer.write(f"{reply}\n".encode(ENCODING))
                await writer.drain()
                with suppress(asyncio.TimeoutError):
                    await asyncio.wait_for(
                        _discard_until_eof(reader), max(deadline - loop.time(), 0)
                    )
            except ConnectionError as exc:
                self.log.append(f"{READ_ERROR_PREFIX}{exc}")


def _atoi(text: str) -> int:
    try:
        return parse_leading_int(text)
    except ValueError:
        return 0


async def _run(port: int, workers: int) -> None:
    server = PoolServer(DEFAULT_HOST, port, workers)
    await server.start()
    try:
        print("Сервер запущен. Нажмите Enter для выхода...", flush=True)
        await asyncio.get_running_loop().run_in_executor(None, sys.stdin.readline)
    finally:
        await server.close()


def main(argv: Sequence[str] | None = None) -> int:
    args = list(sys.argv[1:] if argv is None else argv)
    if len(args) != 2:
        prog = os.path.basename(sys.argv[0]) if sys.argv and sys.argv[0] else "pool_server"
        print(f"Использование: {prog} <port> <threads>", file=sys.stderr)
        return 1
    try:
        asyncio.run(_run(_atoi(args[0]), _atoi(args[1])))
    except KeyboardInterrupt:
        pass
    except (OSError, ValueError) as exc:
        print(f"Ошибка: {exc}", file=sys.stderr)
    return 0


if __name__ == "__main__":
    sys.exit(main())