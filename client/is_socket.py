"""APRS-IS session client built on an asyncio transport."""

from typing import Any, Awaitable, Callable, Dict, List, Optional, Set, Tuple, Union
import asyncio

from protocol.constants import MAX_PACKET_LENGTH
from protocol.encoding import encode_line, encoded_length, is_control_line
from protocol.events import ConnectionState, SessionEvent
from protocol.framing import StreamFramer
from protocol.messages import LoginMessage, LoginResponse
from config.settings import ClientConfig
from utils.logging import get_logger
from utils.exceptions import (
    AlreadyConnectedError,
    MessageTooLongError,
    NotConnectedError,
    TransmitNotPermittedError,
)

logger = get_logger(__name__)

ProtocolFactory = Callable[[], asyncio.Protocol]
Connector = Callable[
    [ProtocolFactory, str, int],
    Awaitable[Tuple[asyncio.BaseTransport, asyncio.Protocol]],
]


async def open_connection(
    protocol_factory: ProtocolFactory, host: str, port: int
) -> Tuple[asyncio.BaseTransport, asyncio.Protocol]:
    """Open a TCP connection on the running loop."""
    loop = asyncio.get_running_loop()
    return await loop.create_connection(protocol_factory, host, port)


class _ISProtocol(asyncio.Protocol):
    """
    Transport callbacks for one connection attempt.

    A new instance is created for every connect, so callbacks arriving late
    from a connection the session already dropped can be told apart and ignored.
    """

    def __init__(self, session: 'ISSocket'):
        self._session = session
        self.transport: Optional[asyncio.Transport] = None
        self.closed: asyncio.Future = asyncio.get_running_loop().create_future()

    def connection_made(self, transport: asyncio.BaseTransport) -> None:
        self.transport = transport
        self._session._connection_made(self)

    def data_received(self, data: bytes) -> None:
        self._session._data_received(self, data)

    def eof_received(self) -> bool:
        self._session._eof_received(self)
        # Let the transport close itself
        return False

    def connection_lost(self, exc: Optional[Exception]) -> None:
        if not self.closed.done():
            self.closed.set_result(None)
        self._session._connection_lost(self, exc)


class ISSocket:
    """
    Client session for a single APRS-IS server connection.

    The session tracks the connection state, frames the inbound stream into
    lines and gates outbound lines through the transmit policy. Everything is
    pushed to subscribers as events rather than pulled:

        session = ISSocket(config)

        @session.on(SessionEvent.PACKET)
        def on_packet(line):
            print(line)

        await session.connect(on_ready=session.send_login)

    Handlers run inline on the event loop. Coroutine handlers are scheduled
    as tasks so slow work never holds up delivery of the next line.
    """

    def __init__(self, config: ClientConfig, connector: Optional[Connector] = None):
        """
        Initialize a new APRS-IS session.

        Args:
            config: Client configuration with endpoint, identity and policy
            connector: Coroutine opening the transport; defaults to
                       loop.create_connection
        """
        self.endpoint = config.endpoint
        self.identity = config.identity
        self.filter: Optional[str] = config.filter
        self.transmit_enabled: bool = config.transmit_enabled
        self.idle_timeout: float = config.idle_timeout
        self.login_response: Optional[LoginResponse] = None

        self._connector: Connector = connector or open_connection
        self._framer = StreamFramer()
        self._state = ConnectionState.DISCONNECTED
        self._protocol: Optional[_ISProtocol] = None
        self._transport: Optional[asyncio.Transport] = None
        self._connect_task: Optional[asyncio.Task] = None
        self._on_ready: Optional[Callable[[], Any]] = None
        self._idle_handle: Optional[asyncio.TimerHandle] = None
        self._handlers: Dict[SessionEvent, List[Callable[..., Any]]] = {}
        # Set for O(1) task tracking
        self._tasks: Set[asyncio.Task] = set()

        logger.debug(f"Created ISSocket for {self.endpoint} as {self.identity.callsign}")

    @property
    def state(self) -> ConnectionState:
        """Current connection state."""
        return self._state

    def is_connected(self) -> bool:
        return self._state is ConnectionState.CONNECTED

    @property
    def login_message(self) -> LoginMessage:
        return LoginMessage(identity=self.identity, filter=self.filter)

    @property
    def user_login(self) -> str:
        """Login line for this session, without delimiter."""
        return self.login_message.to_line()

    def on(self, event: Union[SessionEvent, str], handler: Optional[Callable[..., Any]] = None):
        """
        Subscribe a handler to an event.

        Usable directly, ``session.on('packet', handler)``, or as a decorator,
        ``@session.on(SessionEvent.PACKET)``.

        Args:
            event: SessionEvent or its string value
            handler: Callable or coroutine function receiving the event arguments

        Returns:
            The handler, or a decorator when no handler is given

        Raises:
            ValueError: If the event name is unknown
        """
        event = SessionEvent(event)

        def register(func: Callable[..., Any]) -> Callable[..., Any]:
            self._handlers.setdefault(event, []).append(func)
            return func

        if handler is None:
            return register
        return register(handler)

    def off(self, event: Union[SessionEvent, str], handler: Callable[..., Any]) -> None:
        """Unsubscribe a handler; unknown handlers are ignored."""
        handlers = self._handlers.get(SessionEvent(event), [])
        if handler in handlers:
            handlers.remove(handler)

    def emit(self, event: Union[SessionEvent, str], *args: Any) -> None:
        """Deliver an event to every subscribed handler in subscription order."""
        for handler in list(self._handlers.get(SessionEvent(event), ())):
            self._run_callback(handler, *args)

    def _run_callback(self, callback: Callable[..., Any], *args: Any) -> None:
        try:
            result = callback(*args)
        except Exception:
            logger.error(f"Error in session callback {callback!r}", exc_info=True)
            return

        if asyncio.iscoroutine(result):
            task = asyncio.get_running_loop().create_task(result)
            self._tasks.add(task)
            task.add_done_callback(self._task_done)

    def _task_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.error("Error in session handler task", exc_info=task.exception())

    def connect(self, on_ready: Optional[Callable[[], Any]] = None) -> asyncio.Task:
        """
        Connect to the server.

        The state moves to CONNECTING immediately; CONNECTED follows once the
        transport reports the connection, at which point ``on_ready`` runs.
        The returned task may be awaited but the session never waits on it.

        Args:
            on_ready: Callback invoked once connected, e.g. ``session.send_login``

        Returns:
            Task that completes when connected, or fails with the connect error

        Raises:
            AlreadyConnectedError: If the session is connecting or connected
        """
        if self._state is not ConnectionState.DISCONNECTED:
            raise AlreadyConnectedError(
                f"Cannot connect to {self.endpoint}: session is {self._state.value}"
            )

        loop = asyncio.get_running_loop()

        self._framer.reset()
        self.login_response = None
        self._on_ready = on_ready
        self._protocol = _ISProtocol(self)
        self._state = ConnectionState.CONNECTING

        logger.info(f"Connecting to {self.endpoint}")

        task = loop.create_task(self._open(self._protocol))
        task.add_done_callback(self._connect_done)
        self._connect_task = task
        return task

    async def _open(self, protocol: _ISProtocol) -> None:
        try:
            await self._connector(lambda: protocol, self.endpoint.host, self.endpoint.port)
        except Exception as e:
            logger.error(f"Error connecting to {self.endpoint}: {e}")
            if protocol is self._protocol:
                self._detach()
                self.emit(SessionEvent.ERROR, e)
            raise

    def _connect_done(self, task: asyncio.Task) -> None:
        if self._connect_task is task:
            self._connect_task = None
        # Already logged and emitted; mark retrieved for unawaited tasks
        if not task.cancelled():
            task.exception()

    def disconnect(self, on_complete: Optional[Callable[[], Any]] = None) -> asyncio.Future:
        """
        Close the connection gracefully.

        Pending outbound data is flushed before the transport closes. Calling
        this on a disconnected session is a no-op apart from ``on_complete``.

        Args:
            on_complete: Callback invoked once the connection is closed

        Returns:
            Future resolved once the connection is closed
        """
        loop = asyncio.get_running_loop()
        protocol = self._protocol

        if self._state is ConnectionState.CONNECTED and protocol is not None:
            logger.info(f"Disconnecting from {self.endpoint}")
            future = protocol.closed
            self._transport.close()
        else:
            # Nothing to flush while connecting
            self.destroy()
            future = loop.create_future()
            future.set_result(None)

        if on_complete is not None:
            future.add_done_callback(lambda _: self._run_callback(on_complete))
        return future

    def destroy(self) -> None:
        """
        Abort the connection immediately, discarding unsent and unframed data.

        Safe to call in any state.
        """
        if self._state is ConnectionState.DISCONNECTED:
            return

        logger.info(f"Destroying connection to {self.endpoint}")

        if self._connect_task is not None and not self._connect_task.done():
            self._connect_task.cancel()
        if self._transport is not None:
            self._transport.abort()

        self._detach()

    def _detach(self) -> None:
        """Return to DISCONNECTED and forget the current connection."""
        if self._idle_handle is not None:
            self._idle_handle.cancel()
            self._idle_handle = None

        if self._framer.buffer:
            logger.debug(f"Discarding {len(self._framer.buffer)} unframed characters")

        self._framer.reset()
        self._protocol = None
        self._transport = None
        self._on_ready = None
        self._state = ConnectionState.DISCONNECTED

        self.emit(SessionEvent.DISCONNECT)

    def _arm_idle_timer(self) -> None:
        if self._idle_handle is not None:
            self._idle_handle.cancel()
            self._idle_handle = None

        if self.idle_timeout > 0:
            loop = asyncio.get_running_loop()
            self._idle_handle = loop.call_later(self.idle_timeout, self._idle_timeout_expired)

    def _idle_timeout_expired(self) -> None:
        self._idle_handle = None
        logger.warning(f"No data from {self.endpoint} for {self.idle_timeout}s, dropping connection")
        self.destroy()
        self.emit(SessionEvent.TIMEOUT)

    def _connection_made(self, protocol: _ISProtocol) -> None:
        if protocol is not self._protocol:
            # Session was destroyed while this attempt was in flight
            protocol.transport.close()
            return

        self._transport = protocol.transport
        self._state = ConnectionState.CONNECTED
        logger.info(f"Connected to {self.endpoint}")

        self._arm_idle_timer()
        self.emit(SessionEvent.CONNECT)

        on_ready, self._on_ready = self._on_ready, None
        if on_ready is not None:
            self._run_callback(on_ready)

    def _data_received(self, protocol: _ISProtocol, data: bytes) -> None:
        if protocol is not self._protocol:
            return

        logger.debug(f"Received {len(data)} bytes from {self.endpoint}")
        self._arm_idle_timer()
        self.emit(SessionEvent.DATA, data)

        for line in self._framer.feed(data):
            # A handler may have dropped the connection
            if protocol is not self._protocol:
                break
            self._dispatch_line(line)

    def _dispatch_line(self, line: str) -> None:
        self.emit(SessionEvent.PACKET, line)

        if not is_control_line(line):
            return

        self.emit(SessionEvent.COMMENT, line)

        response = LoginResponse.parse(line)
        if response is not None:
            logger.info(
                f"Logged in as {response.callsign} "
                f"({'verified' if response.verified else 'unverified'}) "
                f"on server {response.server}"
            )
            self.login_response = response
            self.emit(SessionEvent.LOGRESP, response)

    def _eof_received(self, protocol: _ISProtocol) -> None:
        if protocol is not self._protocol:
            return

        logger.info(f"Server {self.endpoint} closed the connection")
        self.emit(SessionEvent.END)

    def _connection_lost(self, protocol: _ISProtocol, exc: Optional[Exception]) -> None:
        if protocol is not self._protocol:
            return

        if exc is not None:
            logger.error(f"Connection to {self.endpoint} lost: {exc}")
        else:
            logger.info(f"Connection to {self.endpoint} closed")

        # Handlers must already see DISCONNECTED
        self._detach()
        if exc is not None:
            self.emit(SessionEvent.ERROR, exc)

    def send_login(self, on_sent: Optional[Callable[[], Any]] = None) -> None:
        """
        Send the user login line.

        The login is always allowed, whatever the transmit policy.

        Args:
            on_sent: Callback invoked once the line is handed to the transport

        Raises:
            NotConnectedError: If the session is not connected
        """
        if not self.is_connected():
            logger.error("Attempted to log in on a disconnected session")
            raise NotConnectedError('Socket not connected.')

        logger.info(f"Logging in to {self.endpoint} as {self.identity.callsign}")
        self._write_line(self.user_login)

        if on_sent is not None:
            asyncio.get_running_loop().call_soon(self._run_callback, on_sent)

    def send(self, message: str) -> None:
        """
        Transmit a line (typically an APRS packet) to the APRS-IS.

        The line should be a complete packet but WITHOUT the <CR><LF>
        separator. Checks run in a fixed order: transmit policy, then
        connection state, then length.

        Args:
            message: Line to send

        Raises:
            TransmitNotPermittedError: If transmit is disabled and the line is
                                       not a '#' command
            NotConnectedError: If the session is not connected
            MessageTooLongError: If the delimited, encoded line exceeds
                                 MAX_PACKET_LENGTH bytes
        """
        if not (self.transmit_enabled or is_control_line(message)):
            raise TransmitNotPermittedError(
                "Transmit is disabled; only the login and '#' commands may be sent"
            )

        if not self.is_connected():
            logger.error("Attempted to send on a disconnected session")
            raise NotConnectedError('Socket not connected.')

        length = encoded_length(message)
        if length > MAX_PACKET_LENGTH:
            raise MessageTooLongError(
                f"Encoded line is {length} bytes, limit is {MAX_PACKET_LENGTH}"
            )

        self._write_line(message)

    def _write_line(self, line: str) -> None:
        data = encode_line(line)
        transport = self._transport
        self.emit(SessionEvent.SENDING, data)
        logger.debug(f"Sending {len(data)} bytes to {self.endpoint}")
        transport.write(data)
