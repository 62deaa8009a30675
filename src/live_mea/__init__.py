"""Live MEA client package.

Records multi-electrode array (MEA) data streamed by the live MEA service. The
service sends one frame with the readings of all four devices, and the client
extracts the 32 electrodes of the selected device.

The structure of this package is as follows:
 - :mod:`live_mea.client` exposes :class:`LiveMEA`, the entry point for
   recording samples.
 - :mod:`live_mea.core` contains the frame decoder, the session that talks to
   the service, the recorder that sequences sessions and the transports.
 - :mod:`live_mea.errors` defines the errors raised by the client.
 - :mod:`live_mea.settings` contains the data model used to parse and validate
   the config.
 - :mod:`live_mea.util` contains utility functions used by the scripts.
 - :mod:`live_mea.scripts` hosts the entry points exposed to the user.
"""
from live_mea.client import LiveMEA
from live_mea.core.samples import LiveData
from live_mea.core.samples import Recording
from live_mea.errors import InvalidSelector
from live_mea.errors import MalformedFrame
from live_mea.errors import SessionConnectionError
from live_mea.settings import MEA_SERVER_URL

__all__ = [
    "LiveMEA",
    "LiveData",
    "Recording",
    "InvalidSelector",
    "MalformedFrame",
    "SessionConnectionError",
    "MEA_SERVER_URL",
]
