"""
EOG signal processing components

This module contains feature extraction and the end-to-end artifact pipeline.
"""

from .features import FeatureExtractor
from .pipeline import EOGPipeline

__all__ = ['FeatureExtractor', 'EOGPipeline']
