"""
HOG descriptor extractor

Ties together the per-image cache and the windowed retrieval: process an
image once, then retrieve descriptors for as many windows as needed.
"""

from typing import Optional, Tuple

import numpy as np

from .cache import DescriptorCache
from .config import HOGConfig
from .retrieval import Window, WindowLike, WindowRetriever


class HOGExtractor:
    """
    Histogram of Oriented Gradients with cached cell histograms

    Workflow:
    1. process(image): gradients + one histogram per cell (once per image)
    2. retrieve(window): block assembly and normalization (per window)

    process() and retrieve() may be called from different threads: a
    retrieval works on a consistent snapshot of the last completed process().

    Example:
        >>> hog = HOGExtractor(blocksize=32, cellsize=16, stride=16)
        >>> hog.process(image)
        >>> descriptor = hog.retrieve((0, 0, 128, 256))
        >>> len(descriptor)
        3780
    """

    def __init__(self,
                 blocksize: Optional[int] = None,
                 cellsize: Optional[int] = None,
                 stride: Optional[int] = None,
                 binning: int = 9,
                 gradient_mode='unsigned',
                 block_norm='L2-Hys',
                 config: Optional[HOGConfig] = None,
                 n_jobs: int = 1):
        """
        Args:
            blocksize: Block side in pixels
            cellsize: Cell side in pixels (default blocksize // 2)
            stride: Block stride in pixels (default blocksize // 2)
            binning: Orientation bins per cell (default 9)
            gradient_mode: 'unsigned' (180) or 'signed' (360)
            block_norm: 'none', 'L1', 'L1-sqrt', 'L2' or 'L2-Hys'
            config: Ready-made configuration; replaces all parameters above
            n_jobs: Worker threads for building the cell grid

        Raises:
            ConfigurationError: On invalid parameters
        """
        if config is None:
            if blocksize is None:
                raise TypeError("HOGExtractor() requires either blocksize or config")
            config = HOGConfig(blocksize, cellsize, stride, binning, gradient_mode, block_norm)

        self.config = config
        self.cache = DescriptorCache(config, n_jobs=n_jobs)
        self.retriever = WindowRetriever(config)

    def process(self, image: np.ndarray) -> None:
        """
        Extract the histogram of every cell of an image

        Args:
            image: Source image (grayscale or BGR, at least blocksize x blocksize)

        Raises:
            InputError: If the image is invalid or smaller than blocksize
        """
        self.cache.process(image)

    def retrieve(self, window: WindowLike) -> np.ndarray:
        """
        Retrieve the HOG descriptor of a window of the last processed image

        Args:
            window: (x, y, width, height) in pixels

        Returns:
            float32 descriptor of length descriptor_size(width, height)

        Raises:
            InputError: If nothing was processed yet, or the window is
                smaller than blocksize or outside the image
        """
        state = self.cache.snapshot()
        window = self.retriever.validate(window, state.image_shape)
        return self.retriever.retrieve(state.cell_hists, window)

    def compute(self, image: np.ndarray, window: Optional[WindowLike] = None) -> np.ndarray:
        """
        Process an image and retrieve one descriptor (whole image by default)
        """
        self.process(image)
        if window is None:
            height, width = self.cache.image_shape
            window = Window(0, 0, width, height)
        return self.retrieve(window)

    def descriptor_size(self, width: int, height: int) -> int:
        """Length of the descriptor of a width x height window"""
        return self.retriever.descriptor_size(width, height)

    def get_magnitudes(self) -> np.ndarray:
        return self.cache.get_magnitudes()

    def get_orientations(self) -> np.ndarray:
        return self.cache.get_orientations()

    @property
    def cell_histograms(self) -> np.ndarray:
        """Read-only (rows, cols, binning) cell histogram grid"""
        return self.cache.cell_hists

    @property
    def n_cells(self) -> Tuple[int, int]:
        return self.cache.n_cells

    @property
    def image_shape(self) -> Tuple[int, int]:
        return self.cache.image_shape

    def __repr__(self) -> str:
        return f"HOGExtractor({self.config!r})"
