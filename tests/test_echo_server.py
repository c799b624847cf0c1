import socket
import threading
import time

import pytest

from linesrv.echo_server import REPLY_PREFIX, handle_connection, main, make_reply, serve


def _free_port():
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as probe:
        probe.bind(("127.0.0.1", 0))
        return probe.getsockname()[1]


def _connect(port, attempts=200):
    for _ in range(attempts):
        try:
            return socket.create_connection(("127.0.0.1", port), timeout=5)
        except ConnectionRefusedError:
            time.sleep(0.02)
    raise AssertionError("server did not start")


def test_make_reply_pins_format():
    assert make_reply("привет") == "Сообщение получено: привет\n"


def test_make_reply_prefix_and_terminator():
    reply = make_reply("abc")
    assert reply.startswith(REPLY_PREFIX)
    assert reply.endswith("abc\n")


def test_handle_connection_returns_line_and_replies():
    server_side, client_side = socket.socketpair()
    with server_side, client_side:
        client_side.sendall(b"hello\n")
        assert handle_connection(server_side) == "hello"
        with client_side.makefile("rb") as stream:
            assert stream.readline() == make_reply("hello").encode("utf-8")


def test_handle_connection_uses_first_line_only():
    server_side, client_side = socket.socketpair()
    with server_side, client_side:
        client_side.sendall(b"first\nsecond\n")
        assert handle_connection(server_side) == "first"


def test_handle_connection_keeps_carriage_return():
    server_side, client_side = socket.socketpair()
    with server_side, client_side:
        client_side.sendall(b"line\r\n")
        assert handle_connection(server_side) == "line\r"


def test_handle_connection_passes_raw_bytes_through():
    server_side, client_side = socket.socketpair()
    with server_side, client_side:
        client_side.sendall(b"\xff\xfe\n")
        handle_connection(server_side)
        with client_side.makefile("rb") as stream:
            assert stream.readline() == REPLY_PREFIX.encode("utf-8") + b"\xff\xfe\n"


def test_handle_connection_raises_on_eof_without_newline():
    server_side, client_side = socket.socketpair()
    with server_side, client_side:
        client_side.sendall(b"partial")
        client_side.shutdown(socket.SHUT_WR)
        with pytest.raises(ConnectionError):
            handle_connection(server_side)


def test_serve_handles_limited_connections(capsys):
    port = _free_port()
    thread = threading.Thread(target=serve, args=("127.0.0.1", port, 1), daemon=True)
    thread.start()
    with _connect(port) as conn:
        conn.sendall("тест\n".encode("utf-8"))
        with conn.makefile("rb") as stream:
            reply = stream.readline().decode("utf-8")
    thread.join(timeout=5)
    assert not thread.is_alive()
    assert reply == make_reply("тест")
    out = capsys.readouterr().out
    assert "Клиент отправил: тест" in out
    assert "Новое подключение установлено" in out


def test_main_reports_bind_failure(capsys):
    with socket.create_server(("127.0.0.1", 0)) as occupied:
        port = occupied.getsockname()[1]
        assert main(["--host", "127.0.0.1", "--port", str(port)]) == 0
    assert capsys.readouterr().err.startswith("Ошибка сервера: ")