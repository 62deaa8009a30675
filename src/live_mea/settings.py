"""Models for parsing and validating the contents of `settings.yaml`."""
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel
from pydantic import field_validator

from live_mea.core.frame import N_DEVICES

MEA_SERVER_URL = "https://livemeaservice2.alpvision.com"
"""Address of the live MEA service."""


class LogLevel(str, Enum):
    """Possible log levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    ERROR = "ERROR"
    WARNING = "WARNING"
    CRITICAL = "CRITICAL"


class TransportModel(BaseModel, extra="forbid"):
    """Settings for the Socket.IO transport."""

    connection_timeout: float = 10.0
    socketio_path: str = "socket.io"
    transports: Optional[List[str]] = None
    ssl_verify: bool = True

    @field_validator("connection_timeout")
    @classmethod
    def _timeout_must_be_positive(cls, v):
        if v <= 0:
            raise ValueError(f"Timeout must be greater than 0, received {v}")
        return v


class ClientSettings(BaseModel, extra="forbid"):
    """Settings for the live MEA client."""

    server_url: str = MEA_SERVER_URL
    response_timeout: float = 30.0
    transport: TransportModel = TransportModel()

    @field_validator("response_timeout")
    @classmethod
    def _timeout_must_be_positive(cls, v):
        if v <= 0:
            raise ValueError(f"Timeout must be greater than 0, received {v}")
        return v


class RecordingModel(BaseModel, extra="forbid"):
    """Settings for a recording run."""

    mea_id: int = 1
    n_samples: int = 10

    @field_validator("mea_id")
    @classmethod
    def _mea_id_must_select_a_device(cls, v):
        if not 1 <= v <= N_DEVICES:
            raise ValueError(f"MEA ID must be in the range 1-{N_DEVICES}")
        return v

    @field_validator("n_samples")
    @classmethod
    def _n_samples_must_not_be_negative(cls, v):
        if v < 0:
            raise ValueError("Number of samples must not be negative")
        return v


class Settings(BaseModel, extra="forbid"):
    """Settings for the live MEA recorder script."""

    log_level: LogLevel
    client: ClientSettings
    recording: RecordingModel
