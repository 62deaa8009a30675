"""Shared fixtures for the live MEA tests."""
import asyncio
from typing import Any, Callable, Dict, List, Optional

import numpy as np
import pytest

from live_mea.core.frame import FRAME_SIZE
from live_mea.core.transport import Transport


class FakeTransport(Transport):
    """In-memory transport that answers the device selection with a frame."""

    def __init__(
        self,
        payload: Any = None,
        connect_error: Optional[str] = None,
        drop_reason: Optional[str] = None,
        respond: bool = True,
        connect_timeout: bool = False,
    ):
        """Create a fake transport.

        Args:
            payload: Frame sent as `livedata` after the device is selected.
            connect_error: If set, connecting fails with this message.
            drop_reason: If set, the server closes the connection instead of
              sending the frame.
            respond: If False, the server never answers the device selection.
            connect_timeout: If True, connecting times out in the transport.
        """
        self.payload = payload
        self.connect_error = connect_error
        self.drop_reason = drop_reason
        self.respond = respond
        self.connect_timeout = connect_timeout
        self.handlers: Dict[str, Callable[..., Any]] = {}
        self.handlers_at_connect: List[str] = []
        self.connect_calls: List[str] = []
        self.emitted: List[tuple] = []
        self.disconnect_calls = 0
        self._connected = False

    @property
    def connected(self) -> bool:
        """Check if the fake is connected."""
        return self._connected

    def on(self, event: str, handler: Callable[..., Any]) -> None:
        """Store the handler."""
        self.handlers[event] = handler

    async def connect(self, url: str) -> None:
        """Connect or fail as configured."""
        self.connect_calls.append(url)
        self.handlers_at_connect = list(self.handlers)
        if self.connect_error is not None:
            self._trigger("connect_error", self.connect_error)
            raise ConnectionError(self.connect_error)
        if self.connect_timeout:
            raise asyncio.TimeoutError()
        self._connected = True

    async def emit(self, event: str, payload: Any) -> None:
        """Record the event and schedule the server answer."""
        self.emitted.append((event, payload))
        if event != "meaid":
            return
        loop = asyncio.get_running_loop()
        if self.drop_reason is not None:
            loop.call_soon(self._server_disconnect)
        elif self.respond:
            loop.call_soon(self._trigger, "livedata", self.payload)

    async def disconnect(self) -> None:
        """Disconnect and notify the disconnect handler."""
        self.disconnect_calls += 1
        if self._connected:
            self._connected = False
            self._trigger("disconnect", "client disconnect")

    def _server_disconnect(self):
        self._connected = False
        self._trigger("disconnect", self.drop_reason)

    def _trigger(self, event: str, *args):
        handler = self.handlers.get(event)
        if handler is not None:
            handler(*args)


class FakeTransportFactory:
    """Creates fake transports and keeps track of them."""

    def __init__(self, fail_at: Optional[int] = None, **transport_kwargs):
        """Store the arguments passed to every created transport.

        Args:
            fail_at: Index of the transport that fails to connect, if any.
            transport_kwargs: Arguments for every created transport.
        """
        self.fail_at = fail_at
        self.transport_kwargs = transport_kwargs
        self.created: List[FakeTransport] = []
        self.open_when_created: List[bool] = []

    def __call__(self) -> FakeTransport:
        """Create a new fake transport."""
        self.open_when_created.append(any(t.connected for t in self.created))
        transport_kwargs = dict(self.transport_kwargs)
        if len(self.created) == self.fail_at:
            transport_kwargs["connect_error"] = "connection refused"
        transport = FakeTransport(**transport_kwargs)
        self.created.append(transport)
        return transport


@pytest.fixture
def indexed_frame() -> np.ndarray:
    """Create a frame where the value at each index is the index itself."""
    return np.arange(FRAME_SIZE, dtype=np.float32)


@pytest.fixture
def frame_bytes(indexed_frame) -> bytes:
    """Serialize the indexed frame as the service does."""
    return indexed_frame.astype("<f4").tobytes()


@pytest.fixture
def transport_factory(frame_bytes) -> FakeTransportFactory:
    """Create a factory of fake transports answering with the indexed frame."""
    return FakeTransportFactory(payload=frame_bytes)


@pytest.fixture
def make_transport_factory():
    """Get the fake transport factory class to configure failures."""
    return FakeTransportFactory
