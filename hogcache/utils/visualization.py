"""
Debug rendering of cell histograms as oriented line segments
"""

import math

import cv2
import numpy as np

from ..features.config import GradientMode
from ..features.extractor import HOGExtractor


def render_vector_mask(hog: HOGExtractor, thickness: int = 1) -> np.ndarray:
    """
    Draw every cell histogram of the last processed image

    For each cell and bin a line is drawn from the cell center along the
    bin's start angle, with length proportional to the bin value relative
    to the cell maximum (at most cellsize / 2). In unsigned mode the line
    extends on both sides of the center. Line intensity encodes the cell
    maximum relative to the image maximum. Cell borders are drawn in white.

    Args:
        hog: Extractor after process()
        thickness: Line thickness in pixels

    Returns:
        uint8 mask with the same height and width as the processed image
    """
    cfg = hog.config
    state = hog.cache.snapshot()
    cell_hists = state.cell_hists
    height, width = state.image_shape
    n_rows, n_cols = cell_hists.shape[:2]
    cs = cfg.cellsize
    half = cs / 2.0

    mask = np.zeros((height, width), dtype=np.uint8)

    cell_max = cell_hists.max(axis=2)
    image_max = float(cell_max.max())

    for i in range(n_rows):
        for j in range(n_cols):
            local_max = float(cell_max[i, j])
            if local_max <= 0:
                continue

            color = int(local_max / image_max * 255.0)
            cx = j * cs + half
            cy = i * cs + half

            for k, value in enumerate(cell_hists[i, j]):
                length = int(value / local_max * half)
                if length <= 0:
                    continue

                angle = math.radians(k * cfg.bin_width)
                tip = (int(round(cx + math.cos(angle) * length)),
                       int(round(cy + math.sin(angle) * length)))
                if cfg.gradient_mode == GradientMode.SIGNED:
                    start = (int(round(cx)), int(round(cy)))
                else:
                    start = (int(round(cx - math.cos(angle) * length)),
                             int(round(cy - math.sin(angle) * length)))
                cv2.line(mask, start, tip, color, thickness)

    # Cell delimiters
    for i in range(1, n_rows):
        cv2.line(mask, (0, i * cs - 1), (width - 1, i * cs - 1), 255, thickness)
    for j in range(1, n_cols):
        cv2.line(mask, (j * cs - 1, 0), (j * cs - 1, height - 1), 255, thickness)

    return mask


def overlay_vector_mask(image: np.ndarray, mask: np.ndarray, alpha: float = 0.6) -> np.ndarray:
    """
    Blend a vector mask onto an image

    Args:
        image: Grayscale or BGR image (uint8)
        mask: Output of render_vector_mask()
        alpha: Weight of the original image

    Returns:
        BGR uint8 image with the mask drawn in green
    """
    if image.ndim == 2:
        base = cv2.cvtColor(image.astype(np.uint8), cv2.COLOR_GRAY2BGR)
    else:
        base = image[:, :, :3].astype(np.uint8)

    base = base[:mask.shape[0], :mask.shape[1]]
    green = np.zeros_like(base)
    green[:, :, 1] = mask[:base.shape[0], :base.shape[1]]

    return cv2.addWeighted(base, alpha, green, 1.0 - alpha, 0)
