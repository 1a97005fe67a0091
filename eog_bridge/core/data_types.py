"""
Core data types for EOG Bridge

This module defines the fundamental data structures used throughout the system
for representing sample frames, derived ocular signals, and artifact events.
"""

from dataclasses import dataclass
from enum import Enum
import numpy as np

# High status bit marking the end of an event
EVENT_OFF_MASK = 0x8000


@dataclass
class Frame:
    """Container for one block of multi-channel samples"""
    data: np.ndarray          # Flat, sample-interleaved buffer (n_channels * n_samples)
    n_channels: int
    n_samples: int
    timestamp: float          # Unix timestamp

    @classmethod
    def from_matrix(cls, matrix: np.ndarray, timestamp: float) -> "Frame":
        """Build a frame from a (channels x samples) matrix"""
        matrix = np.asarray(matrix)
        n_channels, n_samples = matrix.shape
        return cls(data=matrix.flatten(order="F"), n_channels=n_channels,
                   n_samples=n_samples, timestamp=timestamp)


@dataclass
class OcularSignals:
    """Horizontal and vertical EOG derived from one frame"""
    heog: np.ndarray          # Shape: (n_samples,)
    veog: np.ndarray          # Shape: (n_samples,)

    def peak(self) -> float:
        """Largest rectified amplitude across both signals"""
        # NaN in either signal propagates
        return float(np.max(np.abs(np.concatenate([self.heog, self.veog]))))


class DetectorState(Enum):
    IDLE = "idle"
    ACTIVE = "active"


@dataclass(frozen=True)
class ArtifactEvent:
    """Onset or offset of an ocular artifact"""
    timestamp: float
    code: int

    @property
    def is_offset(self) -> bool:
        return bool(self.code & EVENT_OFF_MASK)

    @property
    def base_code(self) -> int:
        return self.code & ~EVENT_OFF_MASK

    @classmethod
    def onset(cls, timestamp: float, code: int) -> "ArtifactEvent":
        return cls(timestamp=timestamp, code=code)

    @classmethod
    def offset(cls, timestamp: float, code: int) -> "ArtifactEvent":
        return cls(timestamp=timestamp, code=code | EVENT_OFF_MASK)


@dataclass(frozen=True)
class DetectorSettings:
    """Immutable snapshot of the runtime tunables"""
    threshold: float
    debounce_duration: float  # Seconds

