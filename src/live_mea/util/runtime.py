"""Functions commonly used by scripts."""
import contextlib
import logging
from logging.handlers import MemoryHandler
import os
import sys
from typing import AsyncIterator

from live_mea.core.transport import Transport
from live_mea.settings import LogLevel

logger = logging.getLogger(__name__)

LIVE_MEA_HOME = os.path.join(os.path.expanduser("~"), ".live_mea")


def initialize_logger(script_name: str):
    """Initialize the logger.

    Store log messages in memory until the logger is configured.
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.NOTSET)
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(_get_log_message_format(script_name)))
    temp_handler = MemoryHandler(1000, target=handler)
    root_logger.addHandler(temp_handler)


def configure_logger(script_name: str, log_level: LogLevel):
    """Set up the logger."""
    root_logger = logging.getLogger()
    for handler in root_logger.handlers:
        if isinstance(handler, MemoryHandler):
            level = logging.getLevelName(log_level.value.upper())
            filtered_buffer = filter(
                lambda record: record.levelno >= level, handler.buffer
            )
            handler.buffer = list(filtered_buffer)
            break

    logging.basicConfig(
        format=_get_log_message_format(script_name), level=log_level.value, force=True
    )


def _get_log_message_format(script_name: str):
    return f"%(levelname)s [{script_name}]: %(message)s"


def get_configs_dir() -> str:
    """Get the path for the directory containing user configuration files."""
    return LIVE_MEA_HOME


@contextlib.asynccontextmanager
async def open_connection(transport: Transport, url: str) -> AsyncIterator[Transport]:
    """Open a managed connection to the given transport.

    The connection is released after it is consumed, including when
    connecting fails.

    Args:
        transport: The transport to connect.
        url: Address of the service.
    """
    try:
        await transport.connect(url)
        yield transport
    finally:
        await transport.disconnect()
