"""Cylindrical climate grid: topology helpers and per-cell state."""

import numpy as np
from typing import NamedTuple, Optional
from dataclasses import dataclass, field


# Latitude of the first (north) and last (south) row, in degrees
NORTH_ROW_LATITUDE = 89.0
LATITUDE_SPAN = 178.0

# Output sentinel for ocean / not yet computed cells
UNCLASSIFIED = -1


class GridConfig(NamedTuple):
    """Grid dimensions."""
    width: int
    height: int


class ClassifiedCell(NamedTuple):
    """Climate levels and biome of a single land cell."""
    temperature: int
    humidity: int
    biome: int


def index(x: int, y: int, width: int) -> int:
    """Flat row-major index of (x, y)."""
    return y * width + x


def wrap_x(x, width: int):
    """Wrap a column (or array of columns) around the longitude seam."""
    return ((x % width) + width) % width


def latitude(y, height: int):
    """
    Latitude in degrees of a row (or array of rows).

    Row 0 is +89°, row height-1 is -89°, linear in between. A single-row
    grid sits on the equator.
    """
    if height == 1:
        return np.zeros_like(np.asarray(y, dtype=np.float64))
    return NORTH_ROW_LATITUDE - LATITUDE_SPAN * (np.asarray(y, dtype=np.float64) / (height - 1))


def abs_latitude(y, height: int):
    """Absolute latitude of a row (or array of rows)."""
    return np.abs(latitude(y, height))


def row_latitudes(height: int) -> np.ndarray:
    """Latitude of every row, shape (height,)."""
    return latitude(np.arange(height), height)


def clamp_row(y, height: int):
    """Clamp a row (or array of rows) to the grid; rows never wrap."""
    return np.clip(y, 0, height - 1)


def shift_west(layer: np.ndarray) -> np.ndarray:
    """Value of the western neighbour (x - 1, wrapped) at every cell."""
    return np.roll(layer, 1, axis=1)


def shift_east(layer: np.ndarray) -> np.ndarray:
    """Value of the eastern neighbour (x + 1, wrapped) at every cell."""
    return np.roll(layer, -1, axis=1)


def shift_north(layer: np.ndarray) -> np.ndarray:
    """Value of the row above at every cell; row 0 reads itself."""
    shifted = np.empty_like(layer)
    shifted[1:] = layer[:-1]
    shifted[0] = layer[0]
    return shifted


def shift_south(layer: np.ndarray) -> np.ndarray:
    """Value of the row below at every cell; the last row reads itself."""
    shifted = np.empty_like(layer)
    shifted[:-1] = layer[1:]
    shifted[-1] = layer[-1]
    return shifted


@dataclass
class GridState:
    """
    Land/mountain masks plus the classification buffers of one grid.

    Masks are owned by the editing side and may change between runs. The
    output buffers are owned by the kernel and are overwritten wholesale by
    every call to ``compute_biomes``; they are stale as soon as a mask changes.
    All arrays have shape (height, width).
    """
    width: int
    height: int

    # Input masks
    land: np.ndarray = field(default=None)
    mountain: np.ndarray = field(default=None)

    # Kernel output (-1 = ocean / not computed)
    temperature: np.ndarray = field(default=None)
    humidity: np.ndarray = field(default=None)
    biome: np.ndarray = field(default=None)

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Grid dimensions must be positive, got {self.width}x{self.height}")

        shape = (self.height, self.width)
        if self.land is None:
            self.land = np.zeros(shape, dtype=bool)
        if self.mountain is None:
            self.mountain = np.zeros(shape, dtype=bool)
        if self.temperature is None:
            self.temperature = np.full(shape, UNCLASSIFIED, dtype=np.int8)
        if self.humidity is None:
            self.humidity = np.full(shape, UNCLASSIFIED, dtype=np.int8)
        if self.biome is None:
            self.biome = np.full(shape, UNCLASSIFIED, dtype=np.int16)

    @classmethod
    def from_config(cls, config: GridConfig) -> "GridState":
        """Create an all-ocean grid."""
        return cls(width=config.width, height=config.height)

    @classmethod
    def from_masks(cls, land, mountain: Optional[np.ndarray] = None) -> "GridState":
        """
        Create a grid from existing masks.

        Args:
            land: Boolean array of shape (height, width)
            mountain: Optional boolean array of the same shape

        Raises:
            ValueError: if the masks break the grid preconditions
        """
        land = np.asarray(land, dtype=bool)
        if land.ndim != 2:
            raise ValueError(f"Land mask must be 2-D, got shape {land.shape}")
        height, width = land.shape
        if mountain is None:
            mountain = np.zeros_like(land)
        state = cls(
            width=width,
            height=height,
            land=land.copy(),
            mountain=np.asarray(mountain, dtype=bool).copy(),
        )
        state.validate()
        return state

    @property
    def shape(self):
        return (self.height, self.width)

    @property
    def n_cells(self) -> int:
        return self.width * self.height

    def validate(self):
        """Check the caller-side preconditions of a run."""
        for name in ("land", "mountain"):
            mask = getattr(self, name)
            if mask.shape != self.shape:
                raise ValueError(
                    f"{name} mask has shape {mask.shape}, expected {self.shape}"
                )
        if np.any(self.mountain & ~self.land):
            raise ValueError("Mountain cells must also be land cells")

    def reset_output(self):
        """Mark every cell as not computed."""
        self.temperature.fill(UNCLASSIFIED)
        self.humidity.fill(UNCLASSIFIED)
        self.biome.fill(UNCLASSIFIED)

    def cell(self, x: int, y: int) -> Optional[ClassifiedCell]:
        """
        Classification of one cell, or None for ocean / not computed.

        x wraps around the longitude seam; y must lie on the grid.
        """
        x = wrap_x(x, self.width)
        if not 0 <= y < self.height:
            raise IndexError(f"Row {y} outside grid of height {self.height}")
        if not self.land[y, x] or self.biome[y, x] == UNCLASSIFIED:
            return None
        return ClassifiedCell(
            temperature=int(self.temperature[y, x]),
            humidity=int(self.humidity[y, x]),
            biome=int(self.biome[y, x]),
        )
