"""
Block normalization strategies

Each strategy rescales a concatenated block histogram in place and returns
it. See Dalal & Triggs (2005), section 6.4, for the variants.
"""

from enum import Enum
from typing import Union

import numpy as np

# Guards the all-zero (flat) block against division by zero
EPSILON = 1e-6

# Component ceiling applied between the two L2 passes of L2-Hys
L2HYS_CLIP = 0.2


def no_norm(v: np.ndarray) -> np.ndarray:
    """Identity"""
    return v


def l1_norm(v: np.ndarray) -> np.ndarray:
    """Divide by the L1 norm: v / (sum(v) + eps)"""
    den = v.sum(dtype=np.float64) + EPSILON
    np.divide(v, den, out=v)
    return v


def l1_sqrt(v: np.ndarray) -> np.ndarray:
    """L1 normalization followed by an element-wise square root"""
    l1_norm(v)
    np.sqrt(v, out=v)
    return v


def l2_norm(v: np.ndarray) -> np.ndarray:
    """Divide by the L2 norm: v / sqrt(sum(v^2) + eps)"""
    den = np.sqrt(np.dot(v.astype(np.float64), v.astype(np.float64)) + EPSILON)
    np.divide(v, den, out=v)
    return v


def l2_hys(v: np.ndarray) -> np.ndarray:
    """
    L2-Hys (Lowe-style clipping)

    L2-normalize, clip every component into [0, 0.2], then L2-normalize
    again. Limits the influence of single strong edges inside a block.
    """
    l2_norm(v)
    np.clip(v, 0.0, L2HYS_CLIP, out=v)
    l2_norm(v)
    return v


class BlockNorm(Enum):
    """
    Closed set of block normalization strategies

    Example:
        >>> block = np.array([3.0, 4.0], dtype=np.float32)
        >>> BlockNorm.parse('L2').apply(block).round(3)
        array([0.6, 0.8], dtype=float32)
    """
    NONE = 'none'
    L1 = 'L1'
    L1_SQRT = 'L1-sqrt'
    L2 = 'L2'
    L2_HYS = 'L2-Hys'

    @classmethod
    def parse(cls, value: Union['BlockNorm', str]) -> 'BlockNorm':
        """
        Resolve a strategy from an enum member or its name ('L2-Hys', 'l1_sqrt', ...)

        Raises:
            ValueError: If the name is not a known strategy
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            key = value.strip().lower().replace('_', '-')
            for member in cls:
                if member.value.lower() == key:
                    return member
        valid = ', '.join(m.value for m in cls)
        raise ValueError(f"Unknown block normalization {value!r} (expected one of: {valid})")

    def apply(self, v: np.ndarray) -> np.ndarray:
        """Normalize the block vector in place and return it"""
        return _STRATEGIES[self](v)


_STRATEGIES = {
    BlockNorm.NONE: no_norm,
    BlockNorm.L1: l1_norm,
    BlockNorm.L1_SQRT: l1_sqrt,
    BlockNorm.L2: l2_norm,
    BlockNorm.L2_HYS: l2_hys,
}
