"""
Prevailing winds and the humidity they carry.

This module implements:
- Three-cell atmospheric circulation (trade winds, westerlies, polar easterlies)
- Oceanic wind exposure: maritime air advected inland along the wind
- Orographic effects: windward bonus and leeward rain shadow near mountains

Wind vectors are (d_row, d_col) grid steps. Marches clamp the row at the
poles and wrap the column around the longitude seam.
"""

import math
import numpy as np
import structlog
from typing import NamedTuple, Tuple

from .grid import clamp_row, row_latitudes, wrap_x

logger = structlog.get_logger()

# Circulation cells by absolute latitude
TRADE_WINDS = "trade_winds"
WESTERLIES = "westerlies"
POLAR_EASTERLIES = "polar_easterlies"

TRADE_WIND_LIMIT = 30
WESTERLIES_LIMIT = 60

# (band, northern hemisphere) -> (d_row, d_col)
WIND_VECTORS = {
    (TRADE_WINDS, True): (1, -1),
    (TRADE_WINDS, False): (-1, 1),
    (WESTERLIES, True): (-1, 1),
    (WESTERLIES, False): (1, -1),
    (POLAR_EASTERLIES, True): (1, -1),
    (POLAR_EASTERLIES, False): (-1, 1),
}

# Share of upwind cells that must be ocean for the maritime bonus
OCEAN_WIND_SHARE = 0.65


class OrographicShadow(NamedTuple):
    """Humidity modifiers from nearby mountains."""
    windward: np.ndarray
    leeward: np.ndarray


def wind_band(abs_lat: float) -> str:
    """Circulation cell for an absolute latitude."""
    if abs_lat < TRADE_WIND_LIMIT:
        return TRADE_WINDS
    if abs_lat < WESTERLIES_LIMIT:
        return WESTERLIES
    return POLAR_EASTERLIES


def wind_vector_for_latitude(lat: float) -> Tuple[int, int]:
    """
    Prevailing wind step at a latitude.

    The equator itself (lat == 0) counts as southern hemisphere.
    """
    return WIND_VECTORS[(wind_band(abs(lat)), lat > 0)]


def wind_vectors_for_rows(height: int) -> Tuple[np.ndarray, np.ndarray]:
    """Wind (d_row, d_col) for every row, as two int arrays of shape (height,)."""
    vectors = [wind_vector_for_latitude(float(lat)) for lat in row_latitudes(height)]
    d_row = np.array([v[0] for v in vectors], dtype=np.int64)
    d_col = np.array([v[1] for v in vectors], dtype=np.int64)
    return d_row, d_col


def _march(shape, d_row: np.ndarray, d_col: np.ndarray, step: int):
    """
    Cell reached from every cell after ``step`` wind steps.

    A negative step marches against the wind. Rows move monotonically, so
    clamping once at the end is the same as clamping after every step.
    """
    height, width = shape
    rows = clamp_row(np.arange(height) + step * d_row, height)[:, None]
    cols = wrap_x(np.arange(width)[None, :] + step * d_col[:, None], width)
    return rows, cols


def ocean_wind_threshold(steps: int) -> int:
    """Ocean cells needed out of ``steps`` (65%, rounded half up, at least 1)."""
    return max(1, int(math.floor(steps * OCEAN_WIND_SHARE + 0.5)))


def compute_ocean_wind_bonus(land: np.ndarray, steps: int) -> np.ndarray:
    """
    Humidity bonus (0 or 1) for land cells fed by maritime air.

    Marches ``steps`` cells upwind from every land cell and counts ocean cells
    along the way; the bonus is granted once the count reaches the threshold.

    Args:
        land: Boolean mask of shape (height, width)
        steps: Upwind march length, floored to 1

    Returns:
        int8 array of bonuses
    """
    steps = max(1, steps)
    threshold = ocean_wind_threshold(steps)
    d_row, d_col = wind_vectors_for_rows(land.shape[0])

    ocean_count = np.zeros(land.shape, dtype=np.int32)
    for step in range(1, steps + 1):
        rows, cols = _march(land.shape, d_row, d_col, -step)
        ocean_count += ~land[rows, cols]

    bonus = (land & (ocean_count >= threshold)).astype(np.int8)
    logger.debug(
        "Computed ocean wind exposure",
        steps=steps,
        threshold=threshold,
        exposed=int(bonus.sum()),
    )
    return bonus


def compute_orographic_shadow(
    land: np.ndarray, mountain: np.ndarray, strength: int, shadow_range: int
) -> OrographicShadow:
    """
    Windward and leeward humidity modifiers of land cells.

    A mountain within ``shadow_range`` steps downwind makes a cell windward
    (air is forced up and rains out on it); a mountain within range upwind
    puts the cell in a rain shadow. Both modifiers equal ``strength``; a
    strength of 0 disables the effect.
    """
    windward = np.zeros(land.shape, dtype=np.int32)
    leeward = np.zeros(land.shape, dtype=np.int32)
    if strength == 0:
        return OrographicShadow(windward=windward, leeward=leeward)

    shadow_range = max(1, shadow_range)
    d_row, d_col = wind_vectors_for_rows(land.shape[0])

    mountain_downwind = np.zeros(land.shape, dtype=bool)
    mountain_upwind = np.zeros(land.shape, dtype=bool)
    for step in range(1, shadow_range + 1):
        rows, cols = _march(land.shape, d_row, d_col, step)
        mountain_downwind |= mountain[rows, cols]
        rows, cols = _march(land.shape, d_row, d_col, -step)
        mountain_upwind |= mountain[rows, cols]

    windward[land & mountain_downwind] = strength
    leeward[land & mountain_upwind] = strength

    logger.debug(
        "Computed orographic shadow",
        strength=strength,
        range=shadow_range,
        windward=int((windward != 0).sum()),
        leeward=int((leeward != 0).sum()),
    )
    return OrographicShadow(windward=windward, leeward=leeward)
