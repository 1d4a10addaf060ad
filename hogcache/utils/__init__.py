"""
Utility functions for hogcache
"""

from .logger import setup_logger
from .visualization import render_vector_mask, overlay_vector_mask

__all__ = [
    'setup_logger',
    'render_vector_mask',
    'overlay_vector_mask',
]
