"""
Command line interface for EOG Bridge
"""

from .main import main

__all__ = ['main']
