"""
Coastline-derived climate layers.

This module implements:
- Two-pass chamfer distance from land to the nearest ocean cell
- Coastal cell detection (4-neighbourhood, longitude wrapped)
- Warm/cold ocean current classification of coastal cells
"""

import numpy as np
import structlog
from typing import NamedTuple

from .grid import abs_latitude, shift_east, shift_north, shift_south, shift_west

logger = structlog.get_logger()

# Starting distance of land cells before the sweeps ("infinitely" inland)
INLAND_SENTINEL = 10**9

# Currents only influence coasts equatorward of this latitude
CURRENT_LATITUDE_LIMIT = 60


class Currents(NamedTuple):
    """Coastal cells washed by warm and cold currents."""
    warm: np.ndarray
    cold: np.ndarray


def _sweep_row(row: np.ndarray, offsets: np.ndarray) -> np.ndarray:
    """
    Propagate distances along a row in increasing column order.

    Equivalent to ``d[x] = min(row[x], d[x - 1] + 1)`` for every x; ocean
    cells hold 0 so they restart the count.
    """
    return np.minimum.accumulate(row - offsets) + offsets


def compute_distance_to_coast(land: np.ndarray) -> np.ndarray:
    """
    Approximate 4-connected distance from every land cell to the ocean.

    Ocean cells are 0. The forward sweep (top-left to bottom-right) pulls
    distances from the up and left neighbours, the backward sweep from the
    down and right neighbours. Left/right lookups stop at the grid edge and
    do not wrap around the longitude seam.

    Args:
        land: Boolean mask of shape (height, width)

    Returns:
        int64 array of distances; land without any ocean keeps INLAND_SENTINEL
    """
    height, width = land.shape
    dist = np.where(land, INLAND_SENTINEL, 0).astype(np.int64)
    offsets = np.arange(width, dtype=np.int64)

    # Forward sweep: up, then left (prefix dependency within the row)
    for y in range(height):
        row = dist[y]
        if y > 0:
            row = np.minimum(row, dist[y - 1] + 1)
        dist[y] = _sweep_row(row, offsets)

    # Backward sweep: down, then right
    for y in range(height - 1, -1, -1):
        row = dist[y]
        if y < height - 1:
            row = np.minimum(row, dist[y + 1] + 1)
        dist[y] = _sweep_row(row[::-1], offsets)[::-1]

    return dist


def compute_coastal_mask(land: np.ndarray) -> np.ndarray:
    """
    Flag land cells that touch the ocean.

    Neighbours are the 4 grid neighbours with longitude wrapped; at the polar
    rows the missing vertical neighbour is the cell itself.
    """
    ocean = ~land
    touches_ocean = (
        shift_west(ocean) | shift_east(ocean) | shift_north(ocean) | shift_south(ocean)
    )
    return land & touches_ocean


def compute_currents(land: np.ndarray, coastal: np.ndarray) -> Currents:
    """
    Classify coastal cells by the ocean current reaching them.

    Below 60° of latitude, a coast with ocean only to the west is warmed,
    a coast with ocean only to the east is cooled. Ocean on both or neither
    side leaves the cell unmarked.
    """
    height, _ = land.shape
    in_band = (abs_latitude(np.arange(height), height) < CURRENT_LATITUDE_LIMIT)[:, None]

    ocean_west = ~shift_west(land)
    ocean_east = ~shift_east(land)
    eligible = coastal & in_band

    warm = eligible & ocean_west & ~ocean_east
    cold = eligible & ocean_east & ~ocean_west

    logger.debug("Classified currents", warm=int(warm.sum()), cold=int(cold.sum()))
    return Currents(warm=warm, cold=cold)
