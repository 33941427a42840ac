"""Tests for the command line application."""

import asyncio
import logging
import signal

import pytest

from main_client import ClientApplication
from protocol.events import ConnectionState
from utils.logging import setup_logging


@pytest.fixture
def env(monkeypatch):
    for name in ('APRS_HOST', 'APRS_PORT', 'APRS_CALLSIGN', 'APRS_PASSCODE',
                 'APRS_FILTER', 'APRS_APP_ID', 'APRS_TRANSMIT_ENABLED', 'APRS_IDLE_TIMEOUT'):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


@pytest.mark.asyncio
async def test_missing_configuration_exits_with_error(env):
    assert await ClientApplication().run() == 1


@pytest.mark.asyncio
async def test_connection_refused_exits_with_error(env):
    server = await asyncio.start_server(lambda r, w: None, '127.0.0.1', 0)
    port = server.sockets[0].getsockname()[1]
    server.close()
    await server.wait_closed()

    env.setenv('APRS_HOST', '127.0.0.1')
    env.setenv('APRS_PORT', str(port))

    assert await ClientApplication().run() == 1


@pytest.mark.asyncio
async def test_runs_until_server_closes(env, caplog):
    async def handle(reader, writer):
        await reader.readline()
        writer.write(b"# logresp N0CALL unverified, server T2TEST\r\n")
        await writer.drain()
        writer.close()

    server = await asyncio.start_server(handle, '127.0.0.1', 0)
    port = server.sockets[0].getsockname()[1]
    env.setenv('APRS_HOST', '127.0.0.1')
    env.setenv('APRS_PORT', str(port))

    try:
        with caplog.at_level(logging.INFO):
            code = await asyncio.wait_for(ClientApplication().run(), timeout=5)
    finally:
        server.close()
        await server.wait_closed()

    assert code == 0
    assert "Packet: # logresp N0CALL unverified, server T2TEST" in caplog.text


def test_setup_logging_rejects_unknown_level():
    with pytest.raises(ValueError):
        setup_logging('LOUD')


@pytest.mark.asyncio
async def test_shutdown_while_connecting(env):
    started = asyncio.Event()

    async def hanging_connector(protocol_factory, host, port):
        started.set()
        await asyncio.Event().wait()

    env.setenv('APRS_HOST', 'aprs.server.com')
    app = ClientApplication(connector=hanging_connector)
    run = asyncio.ensure_future(app.run())

    await asyncio.wait_for(started.wait(), timeout=5)
    app.handle_shutdown(signal.SIGINT, None)

    assert await asyncio.wait_for(run, timeout=5) == 0
    assert app.session.state is ConnectionState.DISCONNECTED
