"""
Frame acquisition: sources and the latest-frame buffer
"""

from .frame_buffer import FrameBuffer
from .sources import FrameSource, LSLFrameSource, BrainFlowFrameSource, FakeFrameSource

__all__ = ['FrameBuffer', 'FrameSource', 'LSLFrameSource', 'BrainFlowFrameSource', 'FakeFrameSource']
