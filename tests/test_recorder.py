"""Test recorder.py and client.py modules."""
import asyncio

import numpy as np
import pytest

from live_mea.client import LiveMEA
from live_mea.core.recorder import LiveMEARecorder
from live_mea.core.session import LiveMEASession
from live_mea.core.transport import SocketIOTransport
from live_mea.errors import InvalidSelector
from live_mea.errors import SessionConnectionError
from live_mea.settings import ClientSettings
from live_mea.settings import MEA_SERVER_URL


@pytest.fixture
def recorder(transport_factory) -> LiveMEARecorder:
    """Create a recorder using fake transports."""
    return LiveMEARecorder(LiveMEASession("https://mea.test", transport_factory))


class TestRecordN:
    """Test recording several frames."""

    def test_zero_samples(self, recorder, transport_factory):
        """Test that no connection is made when no samples are requested."""
        recording = asyncio.run(recorder.record_n(1, 0))
        assert recording.empty
        assert transport_factory.created == []

    def test_one_sample(self, recorder, transport_factory):
        """Test a single sample is exactly one session."""
        recording = asyncio.run(recorder.record_n(4, 1))
        assert len(recording) == 1
        assert len(transport_factory.created) == 1
        assert recording[0].data[0, 0] == 393216

    def test_n_samples_in_order(self, recorder, transport_factory, indexed_frame):
        """Test n samples are recorded one session at a time."""
        recording = asyncio.run(recorder.record_n(2, 5))
        assert len(recording) == 5
        assert recording.timestamps == sorted(recording.timestamps)
        expected = indexed_frame[131072:262144].reshape(32, 4096)
        for sample in recording:
            np.testing.assert_array_equal(sample.data, expected)
        assert recording.data.shape == (5, 32, 4096)

    def test_sessions_are_serialized(self, recorder, transport_factory):
        """Test each connection is closed before the next one is created."""
        asyncio.run(recorder.record_n(3, 4))
        assert len(transport_factory.created) == 4
        assert transport_factory.open_when_created == [False] * 4
        for transport in transport_factory.created:
            assert not transport.connected
            assert transport.disconnect_calls == 1
            assert transport.emitted == [("meaid", 2)]

    @pytest.mark.parametrize("selector", [0, 5, 3.0, "1"])
    def test_invalid_selector(self, recorder, transport_factory, selector):
        """Test the selector is validated before any session starts."""
        with pytest.raises(InvalidSelector):
            asyncio.run(recorder.record_n(selector, 3))
        assert transport_factory.created == []

    @pytest.mark.parametrize("n", [-1, 2.5, "3", None, True])
    def test_invalid_number_of_samples(self, recorder, transport_factory, n):
        """Test the number of samples must be a non-negative int."""
        with pytest.raises(ValueError):
            asyncio.run(recorder.record_n(1, n))
        assert transport_factory.created == []

    def test_numpy_integer_number_of_samples(self, recorder, transport_factory):
        """Test numpy integers are accepted like the selector is."""
        recording = asyncio.run(recorder.record_n(np.int64(1), np.int64(3)))
        assert len(recording) == 3
        assert len(transport_factory.created) == 3

    def test_failure_discards_collected_samples(
        self, make_transport_factory, frame_bytes
    ):
        """Test a failing session stops the recording with its error."""
        transport_factory = make_transport_factory(fail_at=2, payload=frame_bytes)
        recorder = LiveMEARecorder(
            LiveMEASession("https://mea.test", transport_factory)
        )
        with pytest.raises(SessionConnectionError, match="connection refused"):
            asyncio.run(recorder.record_n(1, 5))
        assert len(transport_factory.created) == 3
        assert not any(transport.connected for transport in transport_factory.created)


class TestLiveMEA:
    """Test the public client."""

    def test_defaults(self):
        """Test the client targets the live MEA service by default."""
        live_mea = LiveMEA()
        assert live_mea.session.server_url == MEA_SERVER_URL
        assert live_mea.session.response_timeout == 30.0

    def test_record_sample(self, transport_factory):
        """Test recording one sample from the default MEA."""
        live_mea = LiveMEA(transport_factory=transport_factory)
        sample = asyncio.run(live_mea.record_sample())
        assert sample.data[0, 0] == 0
        assert transport_factory.created[0].emitted == [("meaid", 0)]

    def test_record_n_samples_defaults_to_ten(self, transport_factory):
        """Test the default number of samples."""
        live_mea = LiveMEA(transport_factory=transport_factory)
        recording = asyncio.run(live_mea.record_n_samples())
        assert len(recording) == 10
        assert len(transport_factory.created) == 10

    def test_record_sample_invalid_mea_id(self, transport_factory):
        """Test an invalid MEA ID makes no connection."""
        live_mea = LiveMEA(transport_factory=transport_factory)
        with pytest.raises(InvalidSelector):
            asyncio.run(live_mea.record_sample(7))
        assert transport_factory.created == []

    def test_from_settings(self, mocker):
        """Test the client is configured from the client settings."""
        async_client = mocker.patch("socketio.AsyncClient")
        settings = ClientSettings(
            server_url="https://other.test",
            response_timeout=5.0,
            transport={"connection_timeout": 2.0, "transports": ["websocket"]},
        )
        live_mea = LiveMEA.from_settings(settings)
        assert live_mea.session.server_url == "https://other.test"
        assert live_mea.session.response_timeout == 5.0

        transport = live_mea.session._transport_factory()
        assert isinstance(transport, SocketIOTransport)
        assert transport._connection_timeout == 2.0
        assert transport._transports == ["websocket"]
        async_client.assert_called_once_with(reconnection=False, ssl_verify=True)
