"""
Configuration for EOG Bridge

This module contains the default parameters of the EOG artifact node, the
parameter container loaded from JSON files and command line flags, and the
channel geometry derived from it.
"""

import json
import logging
import math
from dataclasses import dataclass, asdict, fields
from typing import Any, Dict

# ============================================================================
# NODE CONFIGURATION - defaults, override with --params FILE or CLI flags
# ============================================================================

# Frame geometry
N_CHANNELS = 16                   # Channels per frame
N_SAMPLES = 32                    # Samples per channel per frame
SAMPLING_FREQ = 512               # Sampling rate (Hz)
BUFFER_SIZE = 512                 # Length of the peak history

# Detection
EOG_THRESHOLD = 30.0              # Peak |HEOG| or |VEOG| that starts an artifact
TIME_EOG = 2.0                    # Minimum artifact duration before offset (s)
EOG_LEFT_CHANNEL = 12             # 1-based, as labelled on the amplifier
EOG_RIGHT_CHANNEL = 16            # 1-based, as labelled on the amplifier
EOG_EVENT_CODE = 0x0400           # Base event code, offset adds 0x8000
UPDATE_EPSILON = 1e-3             # Minimum change applied on reconfiguration

# Communication Configuration
UDP_HOST = "127.0.0.1"            # Event bus host
UDP_PORT = 5005                   # Event bus port
RECONFIG_PORT = 5006              # Runtime reconfiguration listener port


class ConfigurationError(ValueError):
    """Raised when node parameters are inconsistent"""


@dataclass
class NodeParameters:
    """Startup parameters of the EOG node"""
    buffer_size: int = BUFFER_SIZE
    time_eog: float = TIME_EOG
    n_channels: int = N_CHANNELS
    n_samples: int = N_SAMPLES
    sampling_freq: int = SAMPLING_FREQ
    eog_threshold: float = EOG_THRESHOLD
    eog_left_channel: int = EOG_LEFT_CHANNEL
    eog_right_channel: int = EOG_RIGHT_CHANNEL
    event_code: int = EOG_EVENT_CODE

    @classmethod
    def from_dict(cls, values: Dict[str, Any]) -> "NodeParameters":
        """
        Build parameters from a mapping, ignoring unknown keys

        Args:
            values: Mapping of parameter names to values

        Returns:
            NodeParameters: Parameters with defaults for missing keys
        """
        known = {f.name for f in fields(cls)}
        kwargs = {}
        for key, value in values.items():
            if key not in known:
                logging.warning(f"Ignoring unknown parameter: {key}")
                continue
            kwargs[key] = value
        return cls(**kwargs)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @property
    def frame_period_ms(self) -> float:
        """Milliseconds covered by one frame"""
        return 1000.0 * self.n_samples / self.sampling_freq

    def validate(self) -> "NodeParameters":
        """Check geometry, thresholds and channel ranges"""
        for name in ("buffer_size", "n_channels", "n_samples", "sampling_freq"):
            if int(getattr(self, name)) <= 0:
                raise ConfigurationError(f"{name} must be positive, got {getattr(self, name)}")
        for name in ("eog_threshold", "time_eog"):
            value = float(getattr(self, name))
            if not math.isfinite(value) or value <= 0:
                raise ConfigurationError(f"{name} must be a positive number, got {value}")
        if not 0 <= int(self.event_code) <= 0x7FFF:
            raise ConfigurationError(f"event_code must fit in 15 bits, got {self.event_code}")
        for name in ("eog_left_channel", "eog_right_channel"):
            channel = int(getattr(self, name))
            if not 1 <= channel <= self.n_channels:
                raise ConfigurationError(
                    f"{name}={channel} outside 1..{self.n_channels}")
        return self


@dataclass(frozen=True)
class ChannelConfig:
    """Frame geometry and the 0-based indices of the EOG channels"""
    n_channels: int
    n_samples: int
    left_index: int
    right_index: int

    def __post_init__(self):
        for name in ("left_index", "right_index"):
            index = getattr(self, name)
            if not 0 <= index < self.n_channels:
                raise ConfigurationError(f"{name}={index} outside 0..{self.n_channels - 1}")

    @classmethod
    def from_parameters(cls, params: NodeParameters) -> "ChannelConfig":
        # Channels are configured 1-based
        return cls(
            n_channels=int(params.n_channels),
            n_samples=int(params.n_samples),
            left_index=int(params.eog_left_channel) - 1,
            right_index=int(params.eog_right_channel) - 1,
        )


def load_parameters(path: str) -> NodeParameters:
    """
    Load node parameters from a JSON file

    Args:
        path: JSON file with a flat mapping of parameter names

    Returns:
        NodeParameters: Loaded (not yet validated) parameters
    """
    with open(path, "r") as f:
        values = json.load(f)
    if not isinstance(values, dict):
        raise ConfigurationError(f"{path} must contain a JSON object")
    logging.info(f"Loaded parameters: {path}")
    return NodeParameters.from_dict(values)
