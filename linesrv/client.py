"""Interactive client sending one line to a line server and printing the reply."""

from __future__ import annotations

import argparse
import socket
import sys
from collections.abc import Sequence
from dataclasses import dataclass

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 12345


@dataclass(frozen=True)
class _Profile:
    banner: str | None
    prompt: str
    label: str
    error_label: str


_PROFILES = {
    "echo": _Profile(
        banner="Успешно подключено к серверу",
        prompt="Введите сообщение: ",
        label="Ответ сервера: ",
        error_label="Ошибка клиента: ",
    ),
    "factorial": _Profile(
        banner="Успешно подключено к серверу",
        prompt="Enter number: ",
        label="Result: ",
        error_label="Error: ",
    ),
    "timer": _Profile(
        banner=None,
        prompt="Введите команду ('таймер N' или число): ",
        label="Ответ: ",
        error_label="Ошибка: ",
    ),
}


def _exchange(sock: socket.socket, message: str) -> str:
    sock.sendall(f"{message}\n".encode("utf-8"))
    with sock.makefile("rb") as stream:
        raw = stream.readline()
    if not raw.endswith(b"\n"):
        raise ConnectionError("server closed the connection before end of line")
    return raw[:-1].decode("utf-8", "replace")


def send_line(
    host: str = DEFAULT_HOST,
    port: int = DEFAULT_PORT,
    message: str = "",
    timeout: float | None = None,
) -> str:
    """Send ``message`` as one line and return the first reply line without its newline."""
    with socket.create_connection((host, port), timeout=timeout) as sock:
        return _exchange(sock, message)


def _read_stdin_line() -> str:
    line = sys.stdin.readline()
    return line[:-1] if line.endswith("\n") else line


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Send one line to a line server.")
    parser.add_argument("--host", default=DEFAULT_HOST)
    parser.add_argument("--port", type=int, default=DEFAULT_PORT)
    parser.add_argument("--mode", choices=sorted(_PROFILES), default="echo")
    parser.add_argument("--timeout", type=float, default=None)
    args = parser.parse_args(argv)
    profile = _PROFILES[args.mode]
    try:
        with socket.create_connection((args.host, args.port), timeout=args.timeout) as sock:
            if profile.banner is not None:
                print(profile.banner)
            sys.stdout.write(profile.prompt)
            sys.stdout.flush()
            reply = _exchange(sock, _read_stdin_line())
            print(f"{profile.label}{reply}")
    except OSError as exc:
        print(f"{profile.error_label}{exc}", file=sys.stderr)
    return 0


if __name__ == "__main__":
    sys.exit(main())