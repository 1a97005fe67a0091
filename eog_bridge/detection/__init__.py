"""
Artifact detection

This module contains the debounced EOG onset/offset detector.
"""

from .eog_artifact import ArtifactDetector

__all__ = ['ArtifactDetector']
