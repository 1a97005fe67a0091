"""
Latest-frame buffer

Frames arrive on the acquisition thread and are consumed by the evaluation
loop. Only the most recent valid frame is kept; a frame that has not been
consumed when the next one arrives is overwritten.
"""

import logging
import threading
from typing import Optional
import numpy as np

from ..core.config import ChannelConfig
from ..core.data_types import Frame


class FrameBuffer:
    """Single-slot buffer with a "new data" flag"""

    def __init__(self, channel_config: ChannelConfig):
        self.channel_config = channel_config
        self.accepted_frames = 0
        self.dropped_frames = 0
        self._lock = threading.Lock()
        self._frame: Optional[Frame] = None
        self._has_new = False

    def ingest(self, frame: Frame) -> bool:
        """
        Store a frame if its geometry matches the configuration

        Args:
            frame: Incoming sample frame

        Returns:
            bool: True if stored, False if dropped for a dimension mismatch
        """
        cfg = self.channel_config
        if frame.n_channels != cfg.n_channels or frame.n_samples != cfg.n_samples:
            return self._drop(f"Dropped frame {frame.n_channels}x{frame.n_samples}, "
                              f"expected {cfg.n_channels}x{cfg.n_samples}")
        if np.size(frame.data) != cfg.n_channels * cfg.n_samples:
            return self._drop(f"Dropped frame with {np.size(frame.data)} values, "
                              f"expected {cfg.n_channels * cfg.n_samples}")

        with self._lock:
            self._frame = frame
            self._has_new = True
            self.accepted_frames += 1
        return True

    def _drop(self, reason: str) -> bool:
        with self._lock:
            self.dropped_frames += 1
        logging.debug(reason)
        return False

    def take_if_new(self) -> Optional[Frame]:
        """Return the stored frame once, or None if nothing new arrived"""
        with self._lock:
            if not self._has_new:
                return None
            self._has_new = False
            return self._frame
