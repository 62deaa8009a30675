"""Decode live MEA frames into per-electrode matrices.

A frame delivered by the live MEA service holds the readings of every device
at once: 128 electrode channels of 4096 float32 samples, concatenated
channel-major. The channels are ordered by device first (4 devices) and then
by electrode (32 per device). Decoding isolates the 32 channels of the
selected device.
"""
import numbers
from typing import Any

import numpy as np
from numpy import ndarray

from live_mea.errors import InvalidSelector
from live_mea.errors import MalformedFrame

N_DEVICES = 4
ELECTRODES_PER_DEVICE = 32
SAMPLES_PER_ELECTRODE = 4096
FRAME_SIZE = N_DEVICES * ELECTRODES_PER_DEVICE * SAMPLES_PER_ELECTRODE

# The service sends IEEE 754 single precision floats in little-endian order.
FRAME_DTYPE = np.dtype("<f4")


def validate_selector(selector: Any) -> int:
    """Check that the selector identifies one of the MEA devices.

    Args:
        selector: The 1-based MEA ID.

    Returns:
        The selector as a plain int.

    Raises:
        InvalidSelector: If the selector is not an integer in the range 1-4.
    """
    if isinstance(selector, bool) or not isinstance(selector, numbers.Integral):
        raise InvalidSelector(selector)
    if not 1 <= selector <= N_DEVICES:
        raise InvalidSelector(selector)
    return int(selector)


def frame_from_payload(payload: Any) -> ndarray:
    """Interpret a `livedata` payload as a flat array of float32 samples.

    Args:
        payload: Binary buffer (bytes, bytearray, memoryview) or numpy array.
          Numpy arrays are read byte for byte like any other buffer, their
          dtype is not converted.

    Returns:
        One-dimensional float32 array with `FRAME_SIZE` elements.

    Raises:
        MalformedFrame: If the payload is not a buffer or does not hold
          exactly `FRAME_SIZE` samples.
    """
    if isinstance(payload, ndarray):
        payload = np.ascontiguousarray(payload)
    try:
        buffer = memoryview(payload)
    except (TypeError, ValueError) as error:
        raise MalformedFrame(
            f"Expected a binary buffer, got {type(payload).__name__}"
        ) from error
    if not buffer.c_contiguous:
        buffer = memoryview(buffer.tobytes())
    # Samples are always read from the raw bytes, whatever the buffer format.
    buffer = buffer.cast("B")
    if buffer.nbytes % FRAME_DTYPE.itemsize != 0:
        raise MalformedFrame(
            f"Buffer size ({buffer.nbytes} bytes) is not a multiple of "
            f"{FRAME_DTYPE.itemsize} bytes"
        )
    raw = np.frombuffer(buffer, dtype=FRAME_DTYPE)

    if raw.size != FRAME_SIZE:
        raise MalformedFrame(
            f"Expected {FRAME_SIZE} samples "
            f"({N_DEVICES * ELECTRODES_PER_DEVICE} electrodes x "
            f"{SAMPLES_PER_ELECTRODE} samples), got {raw.size}"
        )
    return raw


def decode(raw_buffer: Any, selector: int) -> ndarray:
    """Extract the electrode matrix of one MEA device from a frame.

    Row `r` of the result is the contiguous slice
    `[start + r * 4096, start + (r + 1) * 4096)` of the flat frame, where
    `start = (selector - 1) * 32 * 4096`. Values are not scaled or rounded.

    Args:
        raw_buffer: The frame payload, see :func:`frame_from_payload`.
        selector: The 1-based MEA ID.

    Returns:
        Array of shape (32, 4096) holding one row per electrode. The array
        owns its data, it is not a view on `raw_buffer`.

    Raises:
        InvalidSelector: If the selector is not an integer in the range 1-4.
        MalformedFrame: If the buffer does not match the frame layout.
    """
    selector = validate_selector(selector)
    raw = frame_from_payload(raw_buffer)

    start = (selector - 1) * ELECTRODES_PER_DEVICE * SAMPLES_PER_ELECTRODE
    stop = start + ELECTRODES_PER_DEVICE * SAMPLES_PER_ELECTRODE
    electrode_data = raw[start:stop].reshape(
        ELECTRODES_PER_DEVICE, SAMPLES_PER_ELECTRODE
    )
    return electrode_data.astype(np.float32, copy=True)
