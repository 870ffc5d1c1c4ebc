"""
Legend and colour tables shared with map renderers.

Colours are keyed by biome name so legends and images agree; "Ocean" covers
every unclassified cell.
"""

import numpy as np
from typing import Dict, List, Tuple

from .biomes import BIOMES
from .grid import LATITUDE_SPAN, NORTH_ROW_LATITUDE, UNCLASSIFIED, GridState

OCEAN = "Ocean"

BIOME_COLORS: Dict[str, str] = {
    OCEAN: "#0b2a3a",
    "Permanent ice": "#e5f6ff",
    "Wet glaciers": "#cfe9ff",
    "Seasonal ice": "#d6f0ff",
    "Polar desert": "#d0d6df",
    "Polar tundra": "#9fb3b8",
    "Cold desert": "#b6ad94",
    "Dry tundra": "#8a9a7c",
    "Moist tundra": "#6b8f6f",
    "Taiga": "#2f6a50",
    "Cold wet forest": "#247b62",
    "Temperate desert": "#e1c98f",
    "Temperate steppe": "#b7c56f",
    "Grassland": "#7ecf6b",
    "Temperate forest": "#2f9a4b",
    "Temperate rainforest": "#1e8f68",
    "Hot desert": "#f0d082",
    "Hyper-arid desert": "#f6e6b2",
    "Hot steppe": "#d8c15e",
    "Savanna": "#b7d35f",
    "Dry savanna": "#c7c768",
    "Humid savanna": "#9edb6a",
    "Tropical forest": "#30a356",
    "Rainforest": "#149058",
    "Tropical rainforest": "#0f8348",
    "Extreme rainforest": "#0b713f",
}

# Colours of the mask editor view
SURFACE_COLORS: Dict[str, str] = {
    "ocean": "#0b1b2b",
    "land": "#2a6b3f",
    "mountain": "#7f8a94",
}

LEGEND_GROUPS: List[Tuple[str, Tuple[str, ...]]] = [
    (OCEAN, (OCEAN,)),
    (
        "Polar & Ice",
        ("Permanent ice", "Seasonal ice", "Wet glaciers", "Polar desert", "Polar tundra"),
    ),
    ("Cold", ("Cold desert", "Dry tundra", "Moist tundra", "Taiga", "Cold wet forest")),
    (
        "Temperate",
        (
            "Temperate desert",
            "Temperate steppe",
            "Grassland",
            "Temperate forest",
            "Temperate rainforest",
        ),
    ),
    (
        "Hot & Tropical",
        (
            "Hyper-arid desert",
            "Hot desert",
            "Hot steppe",
            "Savanna",
            "Dry savanna",
            "Humid savanna",
            "Tropical forest",
            "Rainforest",
            "Tropical rainforest",
            "Extreme rainforest",
        ),
    ),
]

LATITUDE_LINES = (-60, -30, 0, 30, 60)


def _validate_palette():
    missing = [name for name in BIOMES if name not in BIOME_COLORS]
    if missing:
        raise ValueError(f"Biomes without a colour: {missing}")
    legend_names = [name for _, names in LEGEND_GROUPS for name in names]
    if sorted(legend_names) != sorted((OCEAN,) + BIOMES):
        raise ValueError("Legend groups must list every biome exactly once")


_validate_palette()


def hex_to_rgb(color: str) -> Tuple[int, int, int]:
    value = color.lstrip("#")
    return int(value[0:2], 16), int(value[2:4], 16), int(value[4:6], 16)


# Row i is the colour of biome id i, the last row is ocean (index -1)
_BIOME_RGB = np.array(
    [hex_to_rgb(BIOME_COLORS[name]) for name in BIOMES] + [hex_to_rgb(BIOME_COLORS[OCEAN])],
    dtype=np.uint8,
)


def biome_rgb(state: GridState) -> np.ndarray:
    """RGB image (height, width, 3) of the last classification."""
    ids = np.where(state.land, state.biome, UNCLASSIFIED)
    return _BIOME_RGB[ids]


def surface_rgb(state: GridState) -> np.ndarray:
    """RGB image (height, width, 3) of the masks themselves."""
    image = np.empty(state.shape + (3,), dtype=np.uint8)
    image[...] = hex_to_rgb(SURFACE_COLORS["ocean"])
    image[state.land] = hex_to_rgb(SURFACE_COLORS["land"])
    image[state.mountain] = hex_to_rgb(SURFACE_COLORS["mountain"])
    return image


def latitude_row(lat: float, height: int) -> int:
    """Grid row nearest to a latitude line."""
    t = (NORTH_ROW_LATITUDE - lat) / LATITUDE_SPAN
    return int(np.floor(t * (height - 1) + 0.5))
