"""Mountain relief shading for renderers."""

import numpy as np

MAX_SHADE = 3


def compute_hillshade(mountain: np.ndarray) -> np.ndarray:
    """
    Directional shade of mountain cells lit from the west.

    For each interior mountain cell, the number of mountain cells in the
    western column of its 3x3 neighbourhood minus those in the eastern column,
    clamped to [-3, 3]. Border rows and columns are not shaded and the
    longitude seam is not crossed.
    """
    shade = np.zeros(mountain.shape, dtype=np.int8)
    height, width = mountain.shape
    if height < 3 or width < 3:
        return shade

    m = mountain.astype(np.int8)
    west = m[:-2, :-2] + m[1:-1, :-2] + m[2:, :-2]
    east = m[:-2, 2:] + m[1:-1, 2:] + m[2:, 2:]
    interior = np.clip(west - east, -MAX_SHADE, MAX_SHADE)

    shade[1:-1, 1:-1] = np.where(mountain[1:-1, 1:-1], interior, 0)
    return shade
