"""pytest configuration and fixtures for the APRS-IS client tests.

Provides:
- FakeTransport: In-memory asyncio transport recording writes
- FakeConnector: Connector handing out FakeTransports instead of sockets
- Fixtures for a client config, connector and session
"""

import asyncio
from typing import List, Optional

import pytest

from client.is_socket import ISSocket
from config.settings import ClientConfig


class FakeTransport(asyncio.Transport):
    """In-memory transport bound to one protocol.

    Writes are recorded; close() and abort() report the connection lost on
    the next loop iteration like a real transport.
    """

    def __init__(self, protocol: asyncio.Protocol) -> None:
        super().__init__()
        self.protocol = protocol
        self.written: List[bytes] = []
        self.closing = False
        self.aborted = False

    def write(self, data: bytes) -> None:
        self.written.append(bytes(data))

    def is_closing(self) -> bool:
        return self.closing

    def close(self) -> None:
        if self.closing:
            return
        self.closing = True
        asyncio.get_running_loop().call_soon(self.protocol.connection_lost, None)

    def abort(self) -> None:
        self.aborted = True
        self.close()

    def get_extra_info(self, name, default=None):
        return default

    @property
    def sent(self) -> bytes:
        return b''.join(self.written)

    def deliver(self, data: bytes) -> None:
        """Deliver data as if received from the server."""
        self.protocol.data_received(data)

    def deliver_eof(self) -> None:
        """Half-close from the server side."""
        if not self.protocol.eof_received():
            self.close()

    def fail(self, exc: Exception) -> None:
        """Drop the connection with a transport error."""
        self.closing = True
        self.protocol.connection_lost(exc)


class FakeConnector:
    """Connector stand-in for loop.create_connection."""

    def __init__(self, error: Optional[Exception] = None) -> None:
        self.error = error
        self.calls: List[tuple] = []
        self.transports: List[FakeTransport] = []

    @property
    def transport(self) -> FakeTransport:
        return self.transports[-1]

    async def __call__(self, protocol_factory, host, port):
        self.calls.append((host, port))
        # Yield like a real connect would
        await asyncio.sleep(0)
        if self.error is not None:
            raise self.error
        protocol = protocol_factory()
        transport = FakeTransport(protocol)
        self.transports.append(transport)
        protocol.connection_made(transport)
        return transport, protocol


@pytest.fixture
def config() -> ClientConfig:
    return ClientConfig(host='aprs.server.com', port=12345, app_id='myapp 1.2')


@pytest.fixture
def connector() -> FakeConnector:
    return FakeConnector()


@pytest.fixture
def session(config, connector) -> ISSocket:
    return ISSocket(config, connector=connector)
