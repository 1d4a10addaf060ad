"""
Per-pixel gradient magnitude and orientation
"""

from typing import NamedTuple

import cv2
import numpy as np

from ..exceptions import InputError

# Centered derivative kernels (cv2.filter2D correlates, so dx = I[x+1] - I[x-1])
KERNEL_X = np.array([[-1, 0, 1]], dtype=np.float32)
KERNEL_Y = KERNEL_X.T.copy()


class GradientField(NamedTuple):
    """Magnitude (>= 0) and orientation (degrees in [0, 360)) grids, same shape as the image"""
    magnitude: np.ndarray
    orientation: np.ndarray

    @property
    def shape(self):
        return self.magnitude.shape


def to_grayscale(image: np.ndarray) -> np.ndarray:
    """
    Convert an image to a single-channel float32 array

    Accepts 2D arrays, (H, W, 1) arrays, BGR (H, W, 3) and BGRA (H, W, 4)
    images of any numeric dtype.

    Raises:
        InputError: If the image is None, empty or has an unsupported shape
    """
    if image is None:
        raise InputError("invalid image: None")

    img = np.asarray(image)
    if img.size == 0:
        raise InputError("invalid image: empty array")
    if not (np.issubdtype(img.dtype, np.number) or img.dtype == np.bool_):
        raise InputError(f"invalid image dtype: {img.dtype}")

    img = img.astype(np.float32, copy=False)

    if img.ndim == 2:
        return np.ascontiguousarray(img)
    if img.ndim == 3:
        channels = img.shape[2]
        if channels == 1:
            return np.ascontiguousarray(img[:, :, 0])
        if channels == 3:
            return cv2.cvtColor(np.ascontiguousarray(img), cv2.COLOR_BGR2GRAY)
        if channels == 4:
            return cv2.cvtColor(np.ascontiguousarray(img), cv2.COLOR_BGRA2GRAY)
        raise InputError(f"invalid image: unsupported channel count {channels}")

    raise InputError(f"invalid image: expected 2D or 3D array, got {img.ndim}D")


def compute_gradients(image: np.ndarray) -> GradientField:
    """
    Compute gradient magnitude and orientation of an image

    Derivatives come from the [-1, 0, 1] kernel horizontally and its
    transpose vertically (borders reflected). Orientation is the phase of
    (dx, dy) in degrees, in [0, 360).

    Args:
        image: Input image (grayscale or BGR)

    Returns:
        GradientField with float32 magnitude and orientation grids
    """
    gray = to_grayscale(image)

    dx = cv2.filter2D(gray, cv2.CV_32F, KERNEL_X)
    dy = cv2.filter2D(gray, cv2.CV_32F, KERNEL_Y)

    magnitude, orientation = cv2.cartToPolar(dx, dy, angleInDegrees=True)

    # cartToPolar may return exactly 360 for tiny negative dy
    orientation[orientation >= 360.0] -= 360.0

    return GradientField(magnitude, orientation)
