"""
Extractor configuration

Holds the block/cell geometry, the number of orientation bins, the gradient
mode and the block normalization strategy. Everything is validated once in
the constructor; instances are read-only afterwards.
"""

import numbers
from enum import IntEnum
from pathlib import Path
from typing import Dict, Optional, Union

import yaml

from ..exceptions import ConfigurationError
from .normalization import BlockNorm


class GradientMode(IntEnum):
    """Orientation range in degrees"""
    UNSIGNED = 180
    SIGNED = 360

    @classmethod
    def parse(cls, value: Union['GradientMode', int, str]) -> 'GradientMode':
        """
        Resolve a gradient mode from an enum member, 180/360 or 'unsigned'/'signed'

        Raises:
            ConfigurationError: If the value does not name a known mode
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls[value.strip().upper()]
            except KeyError:
                raise ConfigurationError(
                    f"Unknown gradient mode '{value}' (expected 'unsigned' or 'signed')"
                ) from None
        if isinstance(value, bool):
            raise ConfigurationError(f"Unknown gradient mode: {value!r}")
        try:
            return cls(value)
        except (TypeError, ValueError):
            raise ConfigurationError(
                f"Unknown gradient mode {value!r} (expected 180 or 360)"
            ) from None


_CONFIG_KEYS = ('blocksize', 'cellsize', 'stride', 'binning', 'gradient_mode', 'block_norm')


def _as_size(name: str, value) -> int:
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise ConfigurationError(f"{name} must be an integer, got {value!r}")
    return int(value)


class HOGConfig:
    """
    HOG extractor parameters

    Example:
        >>> config = HOGConfig(blocksize=32, cellsize=16, stride=16)
        >>> config.block_cells, config.stride_unit, config.block_hist_size
        (2, 1, 36)
    """

    def __init__(self,
                 blocksize: int,
                 cellsize: Optional[int] = None,
                 stride: Optional[int] = None,
                 binning: int = 9,
                 gradient_mode: Union[GradientMode, int, str] = GradientMode.UNSIGNED,
                 block_norm: Union[BlockNorm, str] = BlockNorm.L2_HYS):
        """
        Args:
            blocksize: Block side in pixels (>= 2)
            cellsize: Cell side in pixels (default blocksize // 2)
            stride: Distance between block origins in pixels (default blocksize // 2)
            binning: Number of orientation bins per cell (>= 2)
            gradient_mode: Unsigned (180 degrees) or signed (360 degrees) gradients
            block_norm: Block normalization strategy (default L2-Hys)

        Raises:
            ConfigurationError: If any parameter violates the geometry invariants
        """
        blocksize = _as_size('blocksize', blocksize)
        cellsize = blocksize // 2 if cellsize is None else _as_size('cellsize', cellsize)
        stride = blocksize // 2 if stride is None else _as_size('stride', stride)
        binning = _as_size('binning', binning)

        if blocksize < 2:
            raise ConfigurationError("blocksize must be at least 2 pixels")
        if cellsize < 1:
            raise ConfigurationError("cellsize must be at least 1 pixel")
        if binning < 2:
            raise ConfigurationError("binning must be greater or equal to 2")
        if blocksize % cellsize != 0:
            raise ConfigurationError("blocksize must be a multiple of cellsize")
        if stride < 1:
            raise ConfigurationError("stride must be at least 1 pixel")
        if stride % cellsize != 0:
            raise ConfigurationError("stride must be a multiple of cellsize")

        self._blocksize = blocksize
        self._cellsize = cellsize
        self._stride = stride
        self._binning = binning
        self._gradient_mode = GradientMode.parse(gradient_mode)
        try:
            self._block_norm = BlockNorm.parse(block_norm)
        except ValueError as e:
            raise ConfigurationError(str(e)) from None

    @property
    def blocksize(self) -> int:
        return self._blocksize

    @property
    def cellsize(self) -> int:
        return self._cellsize

    @property
    def stride(self) -> int:
        return self._stride

    @property
    def binning(self) -> int:
        return self._binning

    @property
    def gradient_mode(self) -> GradientMode:
        return self._gradient_mode

    @property
    def block_norm(self) -> BlockNorm:
        return self._block_norm

    @property
    def gradient_range(self) -> int:
        """Orientation range in degrees (180 or 360)"""
        return int(self._gradient_mode)

    @property
    def bin_width(self) -> float:
        """Width of one orientation bin in degrees"""
        return self.gradient_range / self._binning

    @property
    def block_cells(self) -> int:
        """Cells per block side"""
        return self._blocksize // self._cellsize

    @property
    def stride_unit(self) -> int:
        """Block stride in cells"""
        return self._stride // self._cellsize

    @property
    def block_hist_size(self) -> int:
        """Length of one block histogram"""
        return self._binning * self.block_cells ** 2

    def to_dict(self) -> Dict:
        return {
            'blocksize': self._blocksize,
            'cellsize': self._cellsize,
            'stride': self._stride,
            'binning': self._binning,
            'gradient_mode': self._gradient_mode.name.lower(),
            'block_norm': self._block_norm.value,
        }

    @classmethod
    def from_dict(cls, params: Dict) -> 'HOGConfig':
        """
        Build a config from a plain dictionary (e.g. parsed YAML)

        Raises:
            ConfigurationError: On unknown keys or missing blocksize
        """
        unknown = sorted(set(params) - set(_CONFIG_KEYS))
        if unknown:
            raise ConfigurationError(f"Unknown configuration keys: {', '.join(unknown)}")
        if 'blocksize' not in params:
            raise ConfigurationError("Configuration must define 'blocksize'")
        return cls(**params)

    @classmethod
    def from_yaml(cls, path: Union[str, Path]) -> 'HOGConfig':
        """
        Load a config from a YAML file

        The file may either hold the parameters at top level or under a
        'hog' section.
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path, 'r') as f:
            params = yaml.safe_load(f) or {}

        if not isinstance(params, dict):
            raise ConfigurationError(f"Config file must contain a mapping: {path}")
        if 'hog' in params:
            params = params['hog']
        return cls.from_dict(params)

    def to_yaml(self, path: Union[str, Path]) -> None:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, 'w') as f:
            yaml.safe_dump({'hog': self.to_dict()}, f, sort_keys=False)

    def __eq__(self, other) -> bool:
        if not isinstance(other, HOGConfig):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __hash__(self) -> int:
        return hash(tuple(self.to_dict().values()))

    def __repr__(self) -> str:
        params = ', '.join(f"{k}={v!r}" for k, v in self.to_dict().items())
        return f"HOGConfig({params})"
