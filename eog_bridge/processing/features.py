"""
Ocular feature extraction

This module derives the horizontal (HEOG) and vertical (VEOG) eye movement
signals from the two EOG electrodes of a sample frame.
"""

import numpy as np

from ..core.config import ChannelConfig
from ..core.data_types import Frame, OcularSignals


class FeatureExtractor:
    """
    Extract HEOG and VEOG from a frame

    HEOG is the difference of the left and right electrodes, VEOG their mean.
    Both are computed in double precision whatever the sample dtype.
    """

    def __init__(self, channel_config: ChannelConfig):
        self.channel_config = channel_config

    def sample_matrix(self, frame: Frame) -> np.ndarray:
        """
        View a frame as a (samples x channels) matrix

        Args:
            frame: Frame with a flat, sample-interleaved buffer

        Returns:
            np.ndarray: Sample-major matrix, shape (n_samples, n_channels)
        """
        channel_major = np.reshape(np.asarray(frame.data),
                                   (frame.n_channels, frame.n_samples), order="F")
        return channel_major.T

    def extract(self, frame: Frame) -> OcularSignals:
        """
        Compute the ocular signals of one frame

        Args:
            frame: Validated frame matching the channel configuration

        Returns:
            OcularSignals: HEOG and VEOG, each of length n_samples
        """
        samples = self.sample_matrix(frame)
        left = samples[:, self.channel_config.left_index].astype(np.float64)
        right = samples[:, self.channel_config.right_index].astype(np.float64)

        return OcularSignals(heog=left - right, veog=(left + right) / 2.0)
