"""
hogcache: Histogram of Oriented Gradients with cached cell histograms
"""

from .exceptions import HOGError, ConfigurationError, InputError
from .features import (
    BlockNorm,
    GradientMode,
    HOGConfig,
    HOGExtractor,
    Window,
)

__version__ = '1.0.0'

__all__ = [
    'HOGError',
    'ConfigurationError',
    'InputError',
    'BlockNorm',
    'GradientMode',
    'HOGConfig',
    'HOGExtractor',
    'Window',
]
