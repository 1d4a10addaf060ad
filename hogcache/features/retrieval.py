"""
Windowed descriptor retrieval over a cached cell histogram grid
"""

import numbers
from typing import NamedTuple, Tuple, Union

import numpy as np

from ..exceptions import InputError
from .config import HOGConfig


class Window(NamedTuple):
    """Pixel-space rectangle: top-left corner (x, y) and size"""
    x: int
    y: int
    width: int
    height: int


WindowLike = Union[Window, Tuple[int, int, int, int]]


def count_blocks(n_cells: int, block_cells: int, stride_unit: int) -> int:
    """Number of block positions along one axis spanning n_cells cells"""
    if n_cells < block_cells:
        return 0
    return (n_cells - block_cells) // stride_unit + 1


class WindowRetriever:
    """
    Assembles the HOG descriptor of a window from cached cell histograms

    Blocks of block_cells x block_cells cells are visited row by row,
    moving stride_unit cells at a time. Each block histogram is the
    concatenation of its cell histograms in row-major order, normalized
    on its own; the descriptor is the concatenation of all blocks.
    """

    def __init__(self, config: HOGConfig):
        self.config = config

    def descriptor_size(self, width: int, height: int) -> int:
        """
        Length of the descriptor of a width x height window

        Args:
            width: Window width in pixels
            height: Window height in pixels
        """
        cfg = self.config
        n_x = count_blocks(width // cfg.cellsize, cfg.block_cells, cfg.stride_unit)
        n_y = count_blocks(height // cfg.cellsize, cfg.block_cells, cfg.stride_unit)
        return n_x * n_y * cfg.block_hist_size

    def validate(self, window: WindowLike, image_shape: Tuple[int, int]) -> Window:
        """
        Check a window against blocksize and the image bounds

        Raises:
            InputError: If the window is too small or not fully inside the image
        """
        try:
            values = tuple(window)
        except TypeError:
            values = ()
        if len(values) != 4 or not all(
                isinstance(v, numbers.Integral) and not isinstance(v, bool) for v in values):
            raise InputError(f"invalid window {window!r}: expected four integers (x, y, width, height)")
        window = Window(*(int(v) for v in values))

        blocksize = self.config.blocksize
        if window.width < blocksize or window.height < blocksize:
            raise InputError(
                f"window smaller than blocksize: {window.width}x{window.height} < "
                f"{blocksize}x{blocksize}"
            )

        height, width = image_shape
        if (window.x < 0 or window.y < 0 or
                window.x > width - window.width or window.y > height - window.height):
            raise InputError(f"window {tuple(window)} goes outside the image bounds {width}x{height}")

        return window

    def retrieve(self, cell_hists: np.ndarray, window: Window) -> np.ndarray:
        """
        Build the descriptor of an already validated window

        Args:
            cell_hists: (rows, cols, binning) cell histogram grid
            window: Window in pixels

        Returns:
            Fresh float32 descriptor; never aliases cell_hists
        """
        cfg = self.config
        cs = cfg.cellsize
        bc = cfg.block_cells
        step = cfg.stride_unit

        # Window in cell units
        x = window.x // cs
        y = window.y // cs
        width = window.width // cs
        height = window.height // cs

        n_x = count_blocks(width, bc, step)
        n_y = count_blocks(height, bc, step)
        block_size = cfg.block_hist_size

        descriptor = np.empty(n_x * n_y * block_size, dtype=np.float32)

        offset = 0
        for block_y in range(y, y + height - bc + 1, step):
            for block_x in range(x, x + width - bc + 1, step):
                block = np.array(cell_hists[block_y:block_y + bc, block_x:block_x + bc],
                                 dtype=np.float32, copy=True).reshape(-1)
                cfg.block_norm.apply(block)
                descriptor[offset:offset + block_size] = block
                offset += block_size

        return descriptor
