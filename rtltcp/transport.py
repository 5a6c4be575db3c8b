"""Socket helpers: open, exact-length reads and error mapping."""

import socket
from typing import Optional

from .common import RECV_BUFFER_SIZE
from .errors import ConnectionFailed, ShortRead


def open_connection(host: str, port: int, timeout: Optional[float] = None) -> socket.socket:
    """
    Open a TCP connection to an rtl_tcp server.
    Raises ConnectionFailed; the socket is never left open on failure.
    """
    try:
        sock = socket.create_connection((host, port), timeout=timeout)
    except OSError as e:
        raise ConnectionFailed((host, port), e) from e

    try:
        # Commands are 5 bytes each, don't let Nagle batch them
        sock.setsockopt(socket.IPPROTO_TCP, socket.TCP_NODELAY, 1)
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_RCVBUF, RECV_BUFFER_SIZE)
    except OSError as e:
        sock.close()
        raise ConnectionFailed((host, port), e) from e
    return sock


def recv_into_exactly(sock, buffer, what: str = "data") -> int:
    """
    Fill ``buffer`` (any writable C-contiguous buffer) completely from ``sock``.
    Raises ShortRead when the peer closes or the socket errors first.
    """
    view = memoryview(buffer).cast("B")
    requested = view.nbytes
    received = 0
    while received < requested:
        try:
            n = sock.recv_into(view[received:], requested - received)
        except OSError as e:
            raise ShortRead(requested, received, e, what=what) from e
        if n == 0:
            raise ShortRead(requested, received, what=what)
        received += n
    return received


def recv_exactly(sock, num_bytes: int, what: str = "data") -> bytes:
    buf = bytearray(num_bytes)
    recv_into_exactly(sock, buf, what=what)
    return bytes(buf)
