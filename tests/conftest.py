"""Shared fixtures for the EOG Bridge test suite."""

from typing import List

import numpy as np
import pytest

from eog_bridge.communication.event_sink import EventSink
from eog_bridge.core.config import ChannelConfig, NodeParameters
from eog_bridge.core.data_types import ArtifactEvent, Frame

LEFT = 11
RIGHT = 15


class MemoryEventSink(EventSink):
    """Collects emitted events in a list."""

    def __init__(self):
        self.events: List[ArtifactEvent] = []

    def emit(self, event: ArtifactEvent) -> bool:
        self.events.append(event)
        return True


def make_frame(peak: float = 0.0, timestamp: float = 0.0, n_channels: int = 16,
               n_samples: int = 32) -> Frame:
    """Frame whose HEOG peaks at `peak` on the left EOG channel, VEOG at half of it."""
    matrix = np.zeros((n_channels, n_samples), dtype=np.float32)
    if n_channels > LEFT:
        matrix[LEFT, n_samples // 2] = peak
    return Frame.from_matrix(matrix, timestamp)


@pytest.fixture()
def params():
    return NodeParameters()


@pytest.fixture()
def channel_config(params):
    return ChannelConfig.from_parameters(params)


@pytest.fixture()
def sink():
    return MemoryEventSink()
