"""Record sequences of frames from a live MEA device."""
import logging
import numbers

from live_mea.core import frame
from live_mea.core.samples import Recording
from live_mea.core.session import LiveMEASession

logger = logging.getLogger(__name__)


class LiveMEARecorder:
    """Runs sessions one after the other to collect a recording."""

    def __init__(self, session: LiveMEASession):
        """Initialize the LiveMEARecorder class.

        Args:
            session: Session used to record each frame.
        """
        self.session = session

    async def record_n(self, selector: int, n: int) -> Recording:
        """Record `n` frames from the selected MEA device.

        Each frame is recorded in its own session. A session is fully closed
        before the next one starts, so the device selection of one session
        never leaks into another.

        Args:
            selector: The 1-based MEA ID.
            n: Number of frames to record.

        Returns:
            The recorded samples, in the order they were requested.

        Raises:
            InvalidSelector: If the selector is not an integer in the range 1-4.
            ValueError: If `n` is not a non-negative integer.
            SessionConnectionError: If any session fails. Samples recorded
              before the failure are discarded.
            MalformedFrame: If any received frame does not have the expected size.
        """
        selector = frame.validate_selector(selector)
        if isinstance(n, bool) or not isinstance(n, numbers.Integral) or n < 0:
            raise ValueError(f"Number of samples must be a non-negative int, got {n!r}")

        n = int(n)
        recording = Recording()
        for i in range(n):
            logger.debug(f"Recording sample {i + 1}/{n} from MEA {selector}")
            recording.append(await self.session.open_session(selector))
        return recording
