# linesrv

This package has a few small TCP servers and a client for talking to
them. The servers use a simple text protocol. Text is UTF-8.

## Installing

```
pip install .
```

To run the test suite:

```
pip install ".[test]"
pytest
```

## Servers

The echo, factorial and timer servers listen on `0.0.0.0:12345` by default.
You can change the address with `--host` and `--port`. To stop a server,
press Ctrl+C.

### Echo server

```
linesrv-echo [--host HOST] [--port PORT]
```

This server takes one connection at a time and reads one line from it.
It replies `Сообщение получено: <line>` and closes the connection. Then it
prints the received line and waits for the next client.

From Python, `linesrv.echo_server.serve(host, port, limit)` runs the same
loop. If you pass `limit`, it stops after that many connections.
`make_reply(message)` builds the reply text.

### Factorial server

```
linesrv-factorial [--host HOST] [--port PORT]
```

This server handles many clients at once. A connection stays open for as
many lines as the client sends.

For each line, the server reads the integer at the start of the line. It
skips leading whitespace and ignores any text after the number. Then it
replies `Factorial: <n!>`. The result is reduced modulo 2**64. Numbers
below 2 give 1.

If the line does not start with a number, or the number does not fit in a
32-bit signed integer, the server replies `Error: Invalid input`.

### Timer server

```
linesrv-timer [--host HOST] [--port PORT]
```

This server works like the factorial server, with two differences:

- A number gets the reply `Факториал: <n!>`. Bad input gets
  `Ошибка: Введите число или 'таймер N'`.
- The line `таймер N` waits N seconds and then replies
  `Прошло N секунд!`. N must be a positive number. If it is not, the reply
  is `Ошибка: Некорректное время`.

Lines on one connection are answered in order. While a timer is running,
that connection gets no other replies.

### Worker-pool server

```
linesrv-pool <port> <threads>
```

This server listens on `0.0.0.0`. It takes exactly two arguments. With any
other number of arguments, it prints a usage line and exits with status 1.

On each connection, the server reads one request of up to 1024 bytes. It
computes the factorial on a pool of `<threads>` worker threads and replies
`Факториал <n> = <n!>`, followed by a newline. A request that is not a
number gets `Ошибка: некорректный ввод`.

Each connection is answered only once. The server closes the connection
10 seconds after accepting it, or earlier if the client closes it. The
server runs until you press Enter.

Successful results and read errors are added to the server's `log` list.
The log is kept in memory only. Nothing is written to disk.

## Client

```
linesrv-client [--host HOST] [--port PORT] [--mode {echo,factorial,timer}] [--timeout SECONDS]
```

The client connects to `127.0.0.1:12345` by default. It reads one line
from standard input, sends it, and prints the first line of the reply.
`--mode` picks the prompt and the labels to match the server you are
talking to. The default is `echo`.

## Using it from Python

The server classes are `FactorialServer`, `TimerServer` and `PoolServer`:

- `start()` binds the socket and returns the port it bound to. If you
  construct a server with port `0`, it binds to a free port.
- `close()` stops listening and drops every open connection.

The pure helpers can be called directly:

```python
from linesrv.factorial_server import respond, parse_leading_int, factorial_u64
from linesrv.timer_server import parse_timer_command, factorial_reply
from linesrv.pool_server import handle_request
from linesrv.client import send_line

respond("5\n")                  # "Factorial: 120\n"
parse_timer_command("таймер 3")  # 3
handle_request("5")             # "Факториал 5 = 120"
send_line("127.0.0.1", 12345, "5", 5.0)  # needs a running server
```

## What it does not do

The servers have no authentication and no TLS. They keep no state on disk.
The worker-pool server's log lives only as long as the server object.