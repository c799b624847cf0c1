"""Blocking line server that acknowledges one line per connection."""

from __future__ import annotations

import argparse
import itertools
import socket
import sys
from collections.abc import Sequence

DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 12345
REPLY_PREFIX = "Сообщение получено: "
ENCODING = "utf-8"
ERRORS = "surrogateescape"


def _address_parser(description: str) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description=description)
    parser.add_argument("--host", default=DEFAULT_HOST)
    parser.add_argument("--port", type=int, default=DEFAULT_PORT)
    return parser


def make_reply(message: str) -> str:
    """Return the acknowledgement sent back for ``message``."""
    return f"{REPLY_PREFIX}{message}\n"


def _read_line(conn: socket.socket) -> str:
    with conn.makefile("rb") as stream:
        raw = stream.readline()
    if not raw.endswith(b"\n"):
        raise ConnectionError("connection closed before end of line")
    return raw[:-1].decode(ENCODING, ERRORS)


def handle_connection(conn: socket.socket) -> str:
    """Read one line from ``conn``, send the acknowledgement and return the line."""
    message = _read_line(conn)
    conn.sendall(make_reply(message).encode(ENCODING, ERRORS))
    return message


def serve(host: str = DEFAULT_HOST, port: int = DEFAULT_PORT, limit: int | None = None) -> None:
    """Accept connections one after another; stop after ``limit`` of them if given."""
    with socket.create_server((host, port), family=socket.AF_INET) as listener:
        print("Сервер запущен. Ожидание подключений...", flush=True)
        connections = itertools.count() if limit is None else range(limit)
        for _ in connections:
            conn, _address = listener.accept()
            with conn:
                print("Новое подключение установлено", flush=True)
                message = handle_connection(conn)
                print(f"Клиент отправил: {message}", flush=True)


def main(argv: Sequence[str] | None = None) -> int:
    args = _address_parser("Acknowledge one line per connection.").parse_args(argv)
    try:
        serve(args.host, args.port)
    except KeyboardInterrupt:
        pass
    except OSError as exc:
        print(f"Ошибка сервера: {exc}", file=sys.stderr)
    return 0


if __name__ == "__main__":
    sys.exit(main())