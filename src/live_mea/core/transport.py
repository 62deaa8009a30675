"""Event based transports used to talk to the live MEA service."""
import abc
import logging
from typing import Any, Callable, List, Optional

from socketio import exceptions as socketio_exceptions
import socketio

# Event names used by the live MEA service.
SELECT_DEVICE_EVENT = "meaid"
LIVE_DATA_EVENT = "livedata"
CONNECT_ERROR_EVENT = "connect_error"
DISCONNECT_EVENT = "disconnect"


class Transport(abc.ABC):
    """Represents a bidirectional channel of named events.

    Handlers registered with `on` are called with the event payload as
    positional arguments. Handlers must be registered before `connect`.
    """

    @abc.abstractmethod
    def on(self, event: str, handler: Callable[..., Any]) -> None:
        """Register a handler for a named event."""
        pass

    @abc.abstractmethod
    async def connect(self, url: str) -> None:
        """Connect to the service.

        Raises:
            ConnectionError: If the connection cannot be established.
        """
        pass

    @abc.abstractmethod
    async def emit(self, event: str, payload: Any) -> None:
        """Send a named event to the service."""
        pass

    @abc.abstractmethod
    async def disconnect(self) -> None:
        """Disconnect from the service. Calling it when not connected is a no-op."""
        pass

    @property
    @abc.abstractmethod
    def connected(self) -> bool:
        """Check if the transport is connected."""
        pass


class SocketIOTransport(Transport):
    """Transport on top of a Socket.IO asyncio client."""

    def __init__(
        self,
        connection_timeout: float = 10.0,
        socketio_path: str = "socket.io",
        transports: Optional[List[str]] = None,
        ssl_verify: bool = True,
    ):
        """Initialize the SocketIOTransport class.

        Args:
            connection_timeout: Maximum time in seconds to wait for the
              connection to be established.
            socketio_path: Endpoint where the Socket.IO server is installed.
            transports: Allowed Engine.IO transports, e.g. `["websocket"]`.
              Defaults to trying long-polling first and upgrading to websocket.
            ssl_verify: Whether to verify the server SSL certificate.
        """
        self._connection_timeout = connection_timeout
        self._socketio_path = socketio_path
        self._transports = transports
        # Every session owns a fresh connection, so reconnection is left to
        # the caller.
        self._client = socketio.AsyncClient(reconnection=False, ssl_verify=ssl_verify)
        self._logger = logging.getLogger(__name__)

    @property
    def connected(self) -> bool:
        """Check if the Socket.IO client is connected."""
        return self._client.connected

    def on(self, event: str, handler: Callable[..., Any]) -> None:
        """Register a handler for a named Socket.IO event."""
        self._client.on(event, handler)

    async def connect(self, url: str) -> None:
        """Connect to the Socket.IO server at `url`.

        Raises:
            ConnectionError: If the server cannot be reached or refuses the
              connection.
        """
        self._logger.debug(f"Opening Socket.IO connection to {url}")
        try:
            await self._client.connect(
                url,
                transports=self._transports,
                socketio_path=self._socketio_path,
                wait_timeout=self._connection_timeout,
            )
        except socketio_exceptions.ConnectionError as error:
            raise ConnectionError(str(error)) from error

    async def emit(self, event: str, payload: Any) -> None:
        """Send a named event to the Socket.IO server."""
        await self._client.emit(event, payload)

    async def disconnect(self) -> None:
        """Close the Socket.IO connection."""
        await self._client.disconnect()
