"""
Biome classification from latitude bands and climate modifiers.

This module implements:
- The fixed 25-entry biome name table and 5x5 temperature/humidity matrix
- Base temperature and humidity tiers by latitude
- The modifier chain (coast, interior, currents, maritime air, orography,
  mountain cooling, ITCZ floor) and final matrix lookup
"""

import numpy as np
import structlog
from collections import Counter
from typing import Dict, Optional

from .climate import ClimateKnobs, ClimateLayers, derive_climate_layers
from .grid import UNCLASSIFIED, GridState, abs_latitude

logger = structlog.get_logger()

MIN_LEVEL = 0
MAX_LEVEL = 4

BIOMES = (
    "Permanent ice",
    "Polar desert",
    "Polar tundra",
    "Seasonal ice",
    "Wet glaciers",
    "Cold desert",
    "Dry tundra",
    "Moist tundra",
    "Taiga",
    "Cold wet forest",
    "Temperate desert",
    "Temperate steppe",
    "Grassland",
    "Temperate forest",
    "Temperate rainforest",
    "Hot desert",
    "Hot steppe",
    "Savanna",
    "Tropical forest",
    "Rainforest",
    "Hyper-arid desert",
    "Dry savanna",
    "Humid savanna",
    "Tropical rainforest",
    "Extreme rainforest",
)

# BIOME_MATRIX[temperature][humidity], coldest/driest at [0][0]
BIOME_MATRIX = (
    (0, 1, 2, 3, 4),  # Very low temperature
    (5, 6, 7, 8, 9),  # Low
    (10, 11, 12, 13, 14),  # Medium
    (15, 16, 17, 18, 19),  # High
    (20, 21, 22, 23, 24),  # Very high
)

_MATRIX = np.array(BIOME_MATRIX, dtype=np.int16)


def _validate_tables():
    """Every matrix entry must name a biome, and each biome appears once."""
    levels = MAX_LEVEL - MIN_LEVEL + 1
    if _MATRIX.shape != (levels, levels):
        raise ValueError(f"Biome matrix must be {levels}x{levels}, got {_MATRIX.shape}")
    if _MATRIX.min() < 0 or _MATRIX.max() >= len(BIOMES):
        raise ValueError("Biome matrix references an unknown biome")
    if len(np.unique(_MATRIX)) != _MATRIX.size:
        raise ValueError("Biome matrix entries must be distinct")


_validate_tables()


def biome_name(biome_id: int) -> str:
    """Display name of a biome id; -1 is ocean."""
    if biome_id == UNCLASSIFIED:
        return "Ocean"
    return BIOMES[biome_id]


def base_temperature_level(abs_lat):
    """Temperature tier from absolute latitude (4 = hottest)."""
    abs_lat = np.asarray(abs_lat)
    return np.select(
        [abs_lat < 10, abs_lat < 30, abs_lat < 40, abs_lat < 60], [4, 3, 2, 1], 0
    )


def base_humidity_level(abs_lat):
    """Humidity tier from absolute latitude (4 = wettest)."""
    abs_lat = np.asarray(abs_lat)
    return np.select(
        [abs_lat <= 12, abs_lat <= 25, abs_lat <= 35, abs_lat <= 60], [3, 2, 1, 2], 1
    )


class BiomeClassifier:
    """Combines latitude bands and climate layers into biomes."""

    def __init__(self, state: GridState, knobs: Optional[ClimateKnobs] = None):
        """
        Initialize biome classifier.

        Args:
            state: Grid whose masks are classified and whose outputs are written
            knobs: Climate heuristics, defaults when omitted
        """
        self.state = state
        self.knobs = knobs or ClimateKnobs()
        self.layers = None

    def classify(self) -> ClimateLayers:
        """
        Run the whole pipeline and overwrite the grid outputs.

        Returns:
            The intermediate climate layers of this run
        """
        state = self.state
        knobs = self.knobs
        state.validate()

        layers = derive_climate_layers(state, knobs)
        temperature, humidity = self._climate_levels(layers)
        biome = _MATRIX[temperature, humidity]

        # Publish all three buffers together
        land = state.land
        state.temperature[...] = np.where(land, temperature, UNCLASSIFIED)
        state.humidity[...] = np.where(land, humidity, UNCLASSIFIED)
        state.biome[...] = np.where(land, biome, UNCLASSIFIED)

        self.layers = layers
        logger.info(
            "Biome classification complete",
            land_cells=int(land.sum()),
            biomes_present=len(np.unique(state.biome[land])),
        )
        return layers

    def _climate_levels(self, layers: ClimateLayers):
        """Temperature and humidity levels of every cell, clamped to [0, 4]."""
        state = self.state
        knobs = self.knobs
        shape = state.shape

        abs_lat = abs_latitude(np.arange(state.height), state.height)[:, None]
        abs_lat = np.broadcast_to(abs_lat, shape)

        temperature = base_temperature_level(abs_lat).astype(np.int64)
        humidity = base_humidity_level(abs_lat).astype(np.int64)

        if not knobs.sub_dry:
            humidity[(abs_lat > 25) & (abs_lat <= 35)] = 2

        dist = layers.distance_to_coast
        coast_range = knobs.effective_coast_range
        if coast_range > 0:
            humidity[dist <= coast_range] += knobs.coast_hum
        humidity[dist >= knobs.interior_dist] += knobs.interior_dry

        temperature += layers.warm_current
        humidity += layers.warm_current
        temperature -= layers.cold_current
        humidity -= layers.cold_current

        humidity += layers.ocean_wind_bonus
        humidity += layers.windward
        humidity -= layers.leeward

        if knobs.cooling > 0:
            temperature[state.mountain] -= knobs.cooling

        if knobs.itcz_floor:
            equatorial = abs_lat <= 10
            near_equatorial = ~equatorial & (abs_lat <= 15)
            humidity[equatorial] = np.maximum(humidity[equatorial], 3)
            humidity[near_equatorial] = np.maximum(humidity[near_equatorial], 2)

        temperature = np.clip(temperature, MIN_LEVEL, MAX_LEVEL)
        humidity = np.clip(humidity, MIN_LEVEL, MAX_LEVEL)
        return temperature, humidity


def compute_biomes(state: GridState, knobs: Optional[ClimateKnobs] = None) -> ClimateLayers:
    """
    Classify every cell of ``state`` from its current masks.

    Overwrites ``state.temperature``, ``state.humidity`` and ``state.biome``;
    ocean cells get -1 in all three.
    """
    return BiomeClassifier(state, knobs).classify()


def biome_counts(state: GridState) -> Dict[str, int]:
    """Number of land cells per biome name, most common first."""
    ids = state.biome[state.land & (state.biome != UNCLASSIFIED)]
    counts = Counter(int(b) for b in ids)
    return {BIOMES[b]: n for b, n in counts.most_common()}
