"""HOG feature extraction modules"""

from .normalization import BlockNorm, EPSILON, L2HYS_CLIP
from .config import HOGConfig, GradientMode
from .gradient import GradientField, compute_gradients, to_grayscale
from .histogram import CellHistogramBuilder
from .cache import DescriptorCache
from .retrieval import Window, WindowRetriever, count_blocks
from .extractor import HOGExtractor
from .batch import extract_directory, save_features, load_features

__all__ = [
    'BlockNorm',
    'EPSILON',
    'L2HYS_CLIP',
    'HOGConfig',
    'GradientMode',
    'GradientField',
    'compute_gradients',
    'to_grayscale',
    'CellHistogramBuilder',
    'DescriptorCache',
    'Window',
    'WindowRetriever',
    'count_blocks',
    'HOGExtractor',
    'extract_directory',
    'save_features',
    'load_features',
]
