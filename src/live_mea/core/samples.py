"""Containers for the data recorded from a live MEA device."""
from __future__ import annotations

from dataclasses import dataclass
from dataclasses import field
from datetime import datetime
from typing import Iterator, List

from numpy import ndarray
import numpy as np

from live_mea.core.frame import ELECTRODES_PER_DEVICE
from live_mea.core.frame import SAMPLES_PER_ELECTRODE


@dataclass
class LiveData:
    """A decoded frame together with the time it was received."""

    timestamp: datetime
    """Time at which the client finished decoding the frame. This is the time of
    receipt, not the time of acquisition on the device."""

    data: ndarray
    """Electrode matrix of shape (32, 4096). Each row corresponds to an electrode,
    while each column corresponds to a sample."""

    def __post_init__(self):
        """Execute validation checks on the data."""
        _validate_electrode_matrix(self.data)

    def __eq__(self, o: object) -> bool:
        """Compare timestamp and data of two live data objects."""
        if not isinstance(o, LiveData):
            return False
        return self.timestamp == o.timestamp and np.array_equal(self.data, o.data)


@dataclass
class Recording:
    """Ordered collection of live data samples, in request order."""

    samples: List[LiveData] = field(default_factory=list)

    def __len__(self):
        """Return the number of recorded samples."""
        return len(self.samples)

    def __iter__(self) -> Iterator[LiveData]:
        """Iterate over the recorded samples in order."""
        return iter(self.samples)

    def __getitem__(self, index: int) -> LiveData:
        """Get the sample at the given position."""
        return self.samples[index]

    @property
    def empty(self) -> bool:
        """Check if the recording is empty.

        Returns:
            True if no samples were recorded.
        """
        return len(self.samples) == 0

    @property
    def timestamps(self) -> List[datetime]:
        """Get the receipt time of each sample."""
        return [sample.timestamp for sample in self.samples]

    @property
    def data(self) -> ndarray:
        """Stack the electrode matrices of all samples.

        Returns:
            Array of shape (n_samples, 32, 4096).
        """
        if self.empty:
            return np.empty(
                (0, ELECTRODES_PER_DEVICE, SAMPLES_PER_ELECTRODE), dtype=np.float32
            )
        return np.stack([sample.data for sample in self.samples])

    def append(self, sample: LiveData) -> None:
        """Add a sample at the end of the recording."""
        self.samples.append(sample)


def _validate_electrode_matrix(data: ndarray):
    expected_shape = (ELECTRODES_PER_DEVICE, SAMPLES_PER_ELECTRODE)
    if np.shape(data) != expected_shape:
        raise ValueError(
            f"data should be of shape {expected_shape} (electrodes x samples),"
            f" got {np.shape(data)}"
        )
