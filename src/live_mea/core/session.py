"""Recording sessions with the live MEA service.

A session owns one transport connection for its whole lifetime:

1. Connects to the service.
2. Selects the MEA device (1-4), which determines which 32 electrodes to read.
3. Receives a single frame containing all MEA data (128 electrodes x 4096
   samples).
4. Decodes the 32 electrode chunk of the selected device into a 32x4096 array.
5. Disconnects.
"""
import asyncio
from datetime import datetime
import logging
from typing import Any, Callable

from live_mea.core import frame
from live_mea.core.samples import LiveData
from live_mea.core.transport import CONNECT_ERROR_EVENT
from live_mea.core.transport import DISCONNECT_EVENT
from live_mea.core.transport import LIVE_DATA_EVENT
from live_mea.core.transport import SELECT_DEVICE_EVENT
from live_mea.core.transport import Transport
from live_mea.errors import SessionConnectionError
from live_mea.util.runtime import open_connection

TransportFactory = Callable[[], Transport]


class LiveMEASession:
    """Records single frames from the live MEA service."""

    def __init__(
        self,
        server_url: str,
        transport_factory: TransportFactory,
        response_timeout: float = 30.0,
    ):
        """Initialize the LiveMEASession class.

        Args:
            server_url: Address of the live MEA service.
            transport_factory: Callable returning a new, unconnected transport.
              It is called once per session, connections are never reused.
            response_timeout: Maximum time in seconds to wait for the frame
              after the device has been selected.
        """
        if response_timeout <= 0:
            raise ValueError(
                f"Timeout must be greater than 0, received {response_timeout}"
            )
        self.server_url = server_url
        self.response_timeout = response_timeout
        self._transport_factory = transport_factory
        self._logger = logging.getLogger(__name__)

    async def open_session(self, selector: int) -> LiveData:
        """Record one frame from the selected MEA device.

        Args:
            selector: The 1-based MEA ID.

        Returns:
            The decoded electrode matrix and its time of receipt.

        Raises:
            InvalidSelector: If the selector is not an integer in the range 1-4.
              No connection is attempted in that case.
            SessionConnectionError: If the transport fails to connect, drops the
              connection or the frame does not arrive in time.
            MalformedFrame: If the received frame does not have the expected size.
        """
        selector = frame.validate_selector(selector)

        transport = self._transport_factory()
        received: asyncio.Future = asyncio.get_running_loop().create_future()
        self._register_handlers(transport, received)

        try:
            async with open_connection(transport, self.server_url):
                self._logger.info(f"Connected to {self.server_url}")
                # The service expects a 0-based MEA index.
                await transport.emit(SELECT_DEVICE_EVENT, selector - 1)
                payload = await self._wait_for_frame(received)
                self._logger.debug(f"Received frame for MEA {selector}")
                electrode_data = frame.decode(payload, selector)
                live_data = LiveData(timestamp=datetime.now(), data=electrode_data)
        except SessionConnectionError as error:
            self._logger.error(str(error))
            raise
        except (ConnectionError, asyncio.TimeoutError) as error:
            message = str(error) or type(error).__name__
            self._logger.error(f"Failed to connect: {message}")
            raise SessionConnectionError(f"Failed to connect: {message}") from error
        finally:
            _consume_result(received)
            self._logger.debug("Disconnected from server")

        return live_data

    async def _wait_for_frame(self, received: asyncio.Future) -> Any:
        try:
            return await asyncio.wait_for(received, self.response_timeout)
        except asyncio.TimeoutError as error:
            raise SessionConnectionError(
                f"Timed out after {self.response_timeout} seconds waiting for "
                f"'{LIVE_DATA_EVENT}'"
            ) from error

    def _register_handlers(self, transport: Transport, received: asyncio.Future):
        def on_live_data(payload: Any, *args):
            if not received.done():
                received.set_result(payload)

        def on_connect_error(message: Any = None, *args):
            if not received.done():
                received.set_exception(
                    SessionConnectionError(f"Failed to connect: {message}")
                )

        def on_disconnect(*args):
            if not received.done():
                reason = f": {args[0]}" if args else ""
                received.set_exception(
                    SessionConnectionError(f"Connection closed by server{reason}")
                )

        transport.on(LIVE_DATA_EVENT, on_live_data)
        transport.on(CONNECT_ERROR_EVENT, on_connect_error)
        transport.on(DISCONNECT_EVENT, on_disconnect)


def _consume_result(received: asyncio.Future):
    """Mark a failure that was never awaited as retrieved."""
    if received.done() and not received.cancelled():
        received.exception()
    else:
        received.cancel()
