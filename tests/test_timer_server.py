import asyncio
import time
from contextlib import asynccontextmanager

import pytest

from linesrv.timer_server import (
    INPUT_ERROR_REPLY,
    TIME_ERROR_REPLY,
    TimerServer,
    factorial_reply,
    parse_timer_command,
)


@asynccontextmanager
async def connected():
    server = TimerServer("127.0.0.1", 0)
    port = await server.start()
    reader, writer = await asyncio.open_connection("127.0.0.1", port)
    try:
        yield server, reader, writer
    finally:
        writer.close()
        await server.close()


async def ask(reader, writer, line):
    writer.write(line.encode())
    await writer.drain()
    return (await asyncio.wait_for(reader.readline(), 5)).decode()


@pytest.mark.parametrize(
    ("line", "expected"),
    [("таймер 3\n", 3), ("таймер   7 sec\n", 7), ("42\n", None)],
)
def test_parse_timer_command(line, expected):
    assert parse_timer_command(line) == expected


@pytest.mark.parametrize("line", ["таймер 0\n", "таймер -2\n", "таймер abc\n", "таймер \n"])
def test_parse_timer_command_rejects_bad_delay(line):
    with pytest.raises(ValueError):
        parse_timer_command(line)


@pytest.mark.parametrize(
    ("line", "reply"),
    [("5\n", "Факториал: 120\n"), ("hello\n", INPUT_ERROR_REPLY)],
)
def test_factorial_reply(line, reply):
    assert factorial_reply(line) == reply


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("lines", "expected"),
    [
        (["6\n", "x\n"], ["Факториал: 720\n", INPUT_ERROR_REPLY]),
        (["таймер -1\n"], [TIME_ERROR_REPLY]),
    ],
)
async def test_server_answers_lines(lines, expected):
    async with connected() as (_server, reader, writer):
        replies = [await ask(reader, writer, line) for line in lines]
    assert replies == expected


@pytest.mark.asyncio
async def test_timer_reply_arrives_after_delay_and_session_continues():
    async with connected() as (_server, reader, writer):
        started = time.monotonic()
        reply = await ask(reader, writer, "таймер 1\n")
        elapsed = time.monotonic() - started
        after = await ask(reader, writer, "3\n")
    assert reply == "Прошло 1 секунд!\n"
    assert elapsed >= 0.9
    assert after == "Факториал: 6\n"


@pytest.mark.asyncio
async def test_close_cancels_pending_timer():
    async with connected() as (server, reader, writer):
        writer.write("таймер 100\n".encode())
        await writer.drain()
        await asyncio.sleep(0.1)
        await asyncio.wait_for(server.close(), 5)
        rest = await asyncio.wait_for(reader.read(), 5)
    assert rest == b""