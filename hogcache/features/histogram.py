"""
Cell orientation histograms
"""

import numpy as np


class CellHistogramBuilder:
    """
    Bins the pixels of one cell into a magnitude-weighted orientation histogram

    Hard assignment only: every pixel votes its full magnitude into
    floor(orientation / bin_width). In unsigned mode orientations >= 180
    are folded by subtracting 180 before binning.

    Example:
        >>> builder = CellHistogramBuilder(binning=9, gradient_range=180)
        >>> hist = builder.build(cell_mag, cell_ori)
        >>> hist.shape
        (9,)
    """

    def __init__(self, binning: int = 9, gradient_range: int = 180):
        self.binning = binning
        self.gradient_range = gradient_range
        self.bin_width = gradient_range / binning
        self.unsigned = gradient_range == 180

    def bin_indices(self, orientation: np.ndarray) -> np.ndarray:
        """
        Map orientations (degrees, [0, 360)) to bin indices

        Indices are not clamped: an index outside [0, binning) is a
        configuration defect and makes build() raise IndexError.
        """
        orientation = np.asarray(orientation, dtype=np.float64)
        if self.unsigned:
            orientation = np.where(orientation >= 180.0, orientation - 180.0, orientation)
        return np.floor(orientation / self.bin_width).astype(np.intp)

    def build(self, cell_mag: np.ndarray, cell_ori: np.ndarray) -> np.ndarray:
        """
        Build the histogram of one cell

        Args:
            cell_mag: Magnitude sub-grid of the cell
            cell_ori: Orientation sub-grid of the cell (same shape)

        Returns:
            float32 array of length binning
        """
        hist = np.zeros(self.binning, dtype=np.float32)
        indices = self.bin_indices(cell_ori).ravel()
        if indices.size and indices.min() < 0:
            raise IndexError(f"negative orientation bin index {indices.min()}")
        np.add.at(hist, indices, np.asarray(cell_mag, dtype=np.float32).ravel())
        return hist
