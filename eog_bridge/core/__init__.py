"""
Core data types and configuration for EOG Bridge

This module contains the fundamental data classes used throughout the system.
"""

from .data_types import Frame, OcularSignals, DetectorState, ArtifactEvent, DetectorSettings
from .config import NodeParameters, ChannelConfig, ConfigurationError, load_parameters
from .config_port import ConfigPort, InvalidParameterError

__all__ = [
    'Frame', 'OcularSignals', 'DetectorState', 'ArtifactEvent', 'DetectorSettings',
    'NodeParameters', 'ChannelConfig', 'ConfigurationError', 'load_parameters',
    'ConfigPort', 'InvalidParameterError',
]
