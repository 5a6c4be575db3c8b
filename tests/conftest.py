"""Shared fixtures: an in-memory socket stand-in and a one-shot rtl_tcp server."""

import socket
import threading

import pytest

from rtltcp import DongleInfo, RTLTCPClient

R820T_GREETING = bytes.fromhex("52544C30" "00000005" "00000020")


class FakeSocket:
    """Socket double serving ``data`` to recv_into and recording sendall calls."""

    def __init__(self, data: bytes = b"", chunk: int = 0,
                 send_error: OSError = None, recv_error: OSError = None):
        self._data = bytes(data)
        self._pos = 0
        self.chunk = chunk
        self.send_error = send_error
        self.recv_error = recv_error
        self.writes = []
        self.close_count = 0
        self.timeout = "unset"

    @property
    def closed(self):
        return self.close_count > 0

    @property
    def sent(self) -> bytes:
        return b"".join(self.writes)

    def recv_into(self, buffer, nbytes=0):
        if self.recv_error:
            raise self.recv_error
        n = nbytes or len(buffer)
        if self.chunk:
            n = min(n, self.chunk)
        piece = self._data[self._pos:self._pos + n]
        buffer[:len(piece)] = piece
        self._pos += len(piece)
        return len(piece)

    def sendall(self, data):
        if self.send_error:
            raise self.send_error
        self.writes.append(bytes(data))

    def settimeout(self, value):
        self.timeout = value

    def shutdown(self, how):
        pass

    def close(self):
        self.close_count += 1


class MockRTLTCPServer:
    """
    Accepts one client, sends ``greeting + payload`` then half-closes,
    and records every byte the client writes until it disconnects.
    """

    def __init__(self, greeting: bytes = R820T_GREETING, payload: bytes = b""):
        self.greeting = greeting
        self.payload  = payload
        self.received = bytearray()
        self._listener = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        self._listener.bind(("127.0.0.1", 0))
        self._listener.listen(1)
        self._listener.settimeout(5.0)
        self.port = self._listener.getsockname()[1]
        self._thread = threading.Thread(target=self._serve, daemon=True)

    def start(self):
        self._thread.start()
        return self

    def _serve(self):
        try:
            conn, _ = self._listener.accept()
        except OSError:
            return
        with conn:
            conn.settimeout(5.0)
            conn.sendall(self.greeting + self.payload)
            conn.shutdown(socket.SHUT_WR)
            while True:
                try:
                    chunk = conn.recv(4096)
                except OSError:
                    break
                if not chunk:
                    break
                self.received.extend(chunk)

    def wait(self, timeout: float = 5.0):
        self._thread.join(timeout)
        assert not self._thread.is_alive(), "mock server did not finish"

    def close(self):
        self._listener.close()


@pytest.fixture
def mock_server():
    servers = []

    def _make(greeting: bytes = R820T_GREETING, payload: bytes = b""):
        server = MockRTLTCPServer(greeting, payload).start()
        servers.append(server)
        return server

    yield _make
    for server in servers:
        server.close()


@pytest.fixture
def dongle_info():
    return DongleInfo(magic=b"RTL0", tuner=5, gain_count=29)


@pytest.fixture
def fake_client(dongle_info):
    """RTLTCPClient on a FakeSocket; returns (client, sock)."""

    def _make(data: bytes = b"", **kwargs):
        sock = FakeSocket(data, **kwargs)
        return RTLTCPClient(sock, dongle_info), sock

    return _make
