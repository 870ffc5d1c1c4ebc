"""
Plain-text land/mountain masks.

One line per grid row, one glyph per cell:

    .  ocean
    #  land
    ^  mountain (always land)
"""

import numpy as np
from pathlib import Path
from typing import Iterable, List, Union

from .grid import GridState

OCEAN_GLYPH = "."
LAND_GLYPH = "#"
MOUNTAIN_GLYPH = "^"


def parse_mask(rows: Iterable[str]) -> GridState:
    """
    Build a grid from text rows.

    Raises:
        ValueError: on an empty mask, ragged rows or an unknown glyph
    """
    rows = [row.rstrip("\r\n") for row in rows]
    while rows and not rows[-1]:
        rows.pop()
    if not rows:
        raise ValueError("Mask has no rows")

    width = len(rows[0])
    for y, row in enumerate(rows):
        if not row:
            raise ValueError(f"Row {y} is empty")
        if len(row) != width:
            raise ValueError(f"Row {y} has {len(row)} cells, expected {width}")
        unknown = set(row) - {OCEAN_GLYPH, LAND_GLYPH, MOUNTAIN_GLYPH}
        if unknown:
            raise ValueError(f"Row {y} contains unknown glyphs: {''.join(sorted(unknown))}")

    glyphs = np.array([list(row) for row in rows])
    mountain = glyphs == MOUNTAIN_GLYPH
    land = (glyphs == LAND_GLYPH) | mountain
    return GridState.from_masks(land, mountain)


def format_mask(state: GridState) -> List[str]:
    """Text rows of the masks of ``state``."""
    glyphs = np.full(state.shape, OCEAN_GLYPH)
    glyphs[state.land] = LAND_GLYPH
    glyphs[state.mountain] = MOUNTAIN_GLYPH
    return ["".join(row) for row in glyphs]


def load_mask(path: Union[str, Path]) -> GridState:
    """Read a mask file."""
    with open(path, encoding="utf-8") as f:
        return parse_mask(f.readlines())


def save_mask(state: GridState, path: Union[str, Path]):
    """Write the masks of ``state`` to a file."""
    Path(path).write_text("\n".join(format_mask(state)) + "\n", encoding="utf-8")
