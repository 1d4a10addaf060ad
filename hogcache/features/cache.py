"""
Per-image cache of cell histograms

process() is the only pass over every pixel of an image. It stores one
histogram per cell in a (rows, cols, binning) grid that later window
retrievals only read from.
"""

import numbers
import threading
from typing import NamedTuple, Optional, Tuple

import numpy as np
from joblib import Parallel, delayed

from ..exceptions import ConfigurationError, InputError
from .config import HOGConfig
from .gradient import GradientField, compute_gradients
from .histogram import CellHistogramBuilder


class CacheState(NamedTuple):
    """Everything one process() call produces; replaced as a whole"""
    gradients: GradientField
    cell_hists: np.ndarray
    image_shape: Tuple[int, int]


class DescriptorCache:
    """
    Builds and owns the cell histogram grid of the last processed image

    Example:
        >>> cache = DescriptorCache(HOGConfig(blocksize=16))
        >>> cache.process(gray_image)
        >>> cache.n_cells
        (16, 8)
    """

    def __init__(self, config: HOGConfig, n_jobs: int = 1):
        """
        Args:
            config: Extractor configuration
            n_jobs: Worker threads used to build cell rows (1 = sequential,
                -1 = all cores)

        Raises:
            ConfigurationError: If n_jobs is zero or not an integer
        """
        if isinstance(n_jobs, bool) or not isinstance(n_jobs, numbers.Integral) or n_jobs == 0:
            raise ConfigurationError(f"n_jobs must be a non-zero integer, got {n_jobs!r}")

        self.config = config
        self.n_jobs = int(n_jobs)
        self.builder = CellHistogramBuilder(config.binning, config.gradient_range)
        self._state: Optional[CacheState] = None
        self._lock = threading.Lock()

    def process(self, image: np.ndarray) -> None:
        """
        Compute and cache the cell histograms of an image

        Any previously cached grid is discarded.

        Raises:
            InputError: If the image is invalid or smaller than blocksize
        """
        gradients = compute_gradients(image)

        height, width = gradients.shape
        blocksize = self.config.blocksize
        if height < blocksize or width < blocksize:
            raise InputError(
                f"image smaller than blocksize: {width}x{height} < {blocksize}x{blocksize}"
            )

        cell_hists = self._build_grid(gradients)

        with self._lock:
            self._state = CacheState(gradients, cell_hists, (height, width))

    def _build_row(self, gradients: GradientField, row: int, n_cols: int) -> np.ndarray:
        cs = self.config.cellsize
        y = row * cs
        hists = np.empty((n_cols, self.config.binning), dtype=np.float32)
        for col in range(n_cols):
            x = col * cs
            hists[col] = self.builder.build(
                gradients.magnitude[y:y + cs, x:x + cs],
                gradients.orientation[y:y + cs, x:x + cs]
            )
        return hists

    def _build_grid(self, gradients: GradientField) -> np.ndarray:
        height, width = gradients.shape
        n_rows = height // self.config.cellsize
        n_cols = width // self.config.cellsize

        if self.n_jobs == 1:
            rows = [self._build_row(gradients, row, n_cols) for row in range(n_rows)]
        else:
            # Each task fills its own row, so threads share no output
            rows = Parallel(n_jobs=self.n_jobs, prefer='threads')(
                delayed(self._build_row)(gradients, row, n_cols) for row in range(n_rows)
            )

        grid = np.stack(rows, axis=0)
        grid.flags.writeable = False
        return grid

    def snapshot(self) -> CacheState:
        """
        Return the current cache state

        Raises:
            InputError: If process() has not completed yet
        """
        with self._lock:
            state = self._state
        if state is None:
            raise InputError("no cached descriptor grid: call process() first")
        return state

    @property
    def cell_hists(self) -> np.ndarray:
        """Read-only (rows, cols, binning) grid of cell histograms"""
        # A view of a read-only base cannot be made writeable again
        return self.snapshot().cell_hists.view()

    @property
    def n_cells(self) -> Tuple[int, int]:
        """(rows, cols) of the cell grid"""
        return self.snapshot().cell_hists.shape[:2]

    @property
    def image_shape(self) -> Tuple[int, int]:
        """(height, width) of the last processed image"""
        return self.snapshot().image_shape

    def get_magnitudes(self) -> np.ndarray:
        """Copy of the magnitude grid of the last processed image"""
        return self.snapshot().gradients.magnitude.copy()

    def get_orientations(self) -> np.ndarray:
        """Copy of the orientation grid of the last processed image"""
        return self.snapshot().gradients.orientation.copy()
