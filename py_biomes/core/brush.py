"""Disc brush for editing land and mountain masks."""

import numpy as np
import structlog

from .grid import GridState, clamp_row, wrap_x

logger = structlog.get_logger()

BRUSH_MIN = 1
BRUSH_MAX = 40

LAND = "land"
MOUNTAIN = "mountain"
BRUSH_MODES = (LAND, MOUNTAIN)


def clamp_radius(radius: int) -> int:
    return int(np.clip(radius, BRUSH_MIN, BRUSH_MAX))


def brush_cells(state: GridState, gx: int, gy: int, radius: int):
    """
    Rows and columns covered by a disc brush centred on (gx, gy).

    The disc wraps around the longitude seam and is clipped at the poles;
    clipped offsets land on the polar row, so a cell may appear twice.
    """
    offsets = np.arange(-radius, radius + 1)
    dy, dx = np.meshgrid(offsets, offsets, indexing="ij")
    inside = dx * dx + dy * dy <= radius * radius
    rows = clamp_row(gy + dy[inside], state.height)
    cols = wrap_x(gx + dx[inside], state.width)
    return rows, cols


def paint(
    state: GridState,
    gx: int,
    gy: int,
    radius: int,
    mode: str = LAND,
    erase: bool = False,
) -> bool:
    """
    Stamp the brush once.

    Painting land raises land; painting mountains raises land and mountain.
    Erasing land floods the cells (mountains go with them); erasing mountains
    flattens them back to plain land.

    Returns:
        True if any cell changed, i.e. the biome outputs are now stale
    """
    if mode not in BRUSH_MODES:
        raise ValueError(f"Unknown brush mode {mode!r}, expected one of {BRUSH_MODES}")

    rows, cols = brush_cells(state, gx, gy, clamp_radius(radius))
    before_land = state.land[rows, cols].copy()
    before_mountain = state.mountain[rows, cols].copy()

    if not erase:
        state.land[rows, cols] = True
        if mode == MOUNTAIN:
            state.mountain[rows, cols] = True
    elif mode == LAND:
        state.land[rows, cols] = False
        state.mountain[rows, cols] = False
    else:
        state.mountain[rows, cols] = False

    changed = bool(
        np.any(state.land[rows, cols] != before_land)
        or np.any(state.mountain[rows, cols] != before_mountain)
    )
    if changed:
        logger.debug("Painted mask", x=gx, y=gy, radius=radius, mode=mode, erase=erase)
    return changed


def clear(state: GridState):
    """Flood the whole grid and drop any previous classification."""
    state.land.fill(False)
    state.mountain.fill(False)
    state.reset_output()
