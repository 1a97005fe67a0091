"""
EOG Bridge - Online ocular artifact detection for BCI pipelines

A modular Python package that derives HEOG/VEOG from two EOG electrodes of a
streamed EEG frame, detects eye movement artifacts with a debounced
onset/offset state machine, and publishes the events via UDP.

Python: 3.10+
"""

__version__ = "1.0.0"

# Main package imports for easy access
from .core.data_types import Frame, OcularSignals, DetectorState, ArtifactEvent, DetectorSettings
from .core.config import NodeParameters, ChannelConfig
from .core.config_port import ConfigPort
from .acquisition.frame_buffer import FrameBuffer
from .acquisition.sources import LSLFrameSource, BrainFlowFrameSource, FakeFrameSource
from .processing.features import FeatureExtractor
from .processing.pipeline import EOGPipeline
from .detection.eog_artifact import ArtifactDetector
from .communication.event_sink import EventSink, UDPEventSink

__all__ = [
    'Frame', 'OcularSignals', 'DetectorState', 'ArtifactEvent', 'DetectorSettings',
    'NodeParameters', 'ChannelConfig', 'ConfigPort',
    'FrameBuffer', 'LSLFrameSource', 'BrainFlowFrameSource', 'FakeFrameSource',
    'FeatureExtractor', 'EOGPipeline', 'ArtifactDetector',
    'EventSink', 'UDPEventSink'
]
