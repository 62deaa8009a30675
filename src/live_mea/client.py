"""Client for the live MEA service.

Example::

    import asyncio
    from live_mea import LiveMEA

    sample = asyncio.run(LiveMEA().record_sample(mea_id=2))
    print(sample.timestamp, sample.data.shape)  # (32, 4096)
"""
from functools import partial
from typing import Optional

from live_mea.core.recorder import LiveMEARecorder
from live_mea.core.samples import LiveData
from live_mea.core.samples import Recording
from live_mea.core.session import LiveMEASession
from live_mea.core.session import TransportFactory
from live_mea.core.transport import SocketIOTransport
from live_mea.settings import ClientSettings
from live_mea.settings import MEA_SERVER_URL


class LiveMEA:
    """Records live data from the MEA devices exposed by the service."""

    def __init__(
        self,
        server_url: str = MEA_SERVER_URL,
        response_timeout: float = 30.0,
        transport_factory: Optional[TransportFactory] = None,
    ):
        """Initialize the LiveMEA class.

        Args:
            server_url: Address of the live MEA service.
            response_timeout: Maximum time in seconds to wait for a frame
              after the device has been selected.
            transport_factory: Callable returning a new transport for each
              session. Defaults to a Socket.IO transport.
        """
        self.session = LiveMEASession(
            server_url,
            transport_factory or SocketIOTransport,
            response_timeout=response_timeout,
        )
        self.recorder = LiveMEARecorder(self.session)

    @classmethod
    def from_settings(cls, settings: ClientSettings) -> "LiveMEA":
        """Create a client from the parsed client settings."""
        transport_settings = settings.transport
        transport_factory = partial(
            SocketIOTransport,
            connection_timeout=transport_settings.connection_timeout,
            socketio_path=transport_settings.socketio_path,
            transports=transport_settings.transports,
            ssl_verify=transport_settings.ssl_verify,
        )
        return cls(
            server_url=settings.server_url,
            response_timeout=settings.response_timeout,
            transport_factory=transport_factory,
        )

    async def record_sample(self, mea_id: int = 1) -> LiveData:
        """Record a single sample of live MEA data.

        Args:
            mea_id: The MEA ID to use (1-4). Defaults to 1.

        Returns:
            The receipt timestamp and the 32x4096 electrode data array.

        Raises:
            InvalidSelector: If the MEA ID is not an integer in the range 1-4.
            SessionConnectionError: If the connection to the service fails.
            MalformedFrame: If the service sends a frame of unexpected size.
        """
        return await self.session.open_session(mea_id)

    async def record_n_samples(self, mea_id: int = 1, n: int = 10) -> Recording:
        """Record multiple samples of live MEA data.

        Args:
            mea_id: The MEA ID to use (1-4). Defaults to 1.
            n: Number of samples to record. Defaults to 10.

        Returns:
            The recorded samples, in request order.

        Raises:
            InvalidSelector: If the MEA ID is not an integer in the range 1-4.
            SessionConnectionError: If any session fails. No partial recording
              is returned.
            MalformedFrame: If the service sends a frame of unexpected size.
        """
        return await self.recorder.record_n(mea_id, n)
