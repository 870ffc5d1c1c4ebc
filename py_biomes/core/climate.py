"""
Climate layer derivation for the biome classifier.

This module implements:
- Climate knobs (the tunable heuristics of a run)
- Derivation of every intermediate layer from the land/mountain masks:
  distance to coast, coastal mask, ocean currents, oceanic wind exposure
  and orographic windward/leeward modifiers
"""

import numpy as np
import structlog
from dataclasses import dataclass

from .coast import compute_coastal_mask, compute_currents, compute_distance_to_coast
from .grid import GridState
from .wind import compute_ocean_wind_bonus, compute_orographic_shadow

logger = structlog.get_logger()


@dataclass
class ClimateKnobs:
    """Climate heuristics supplied with every run."""

    # Equatorial humidity floor (intertropical convergence zone)
    itcz_floor: bool = True
    # Keep the subtropical dry band; when False it is forced to humidity 2
    sub_dry: bool = True

    # Interior dryness beyond this distance to coast
    interior_dist: int = 54
    interior_dry: int = -1

    # Coastal humidity bonus within coast_range cells of the ocean (0 disables)
    coast_hum: int = 1
    coast_range: int = 12

    # Windward bonus / leeward penalty; 0 disables orographic shadow
    shadow_strength: int = 1
    shadow_range: int = 18

    # Temperature penalty on mountain cells
    cooling: int = 1

    # Upwind march length for maritime air
    ocean_wind_steps: int = 42

    @property
    def effective_coast_range(self) -> int:
        return max(0, self.coast_range)

    @property
    def effective_shadow_range(self) -> int:
        return max(1, self.shadow_range)

    @property
    def effective_ocean_wind_steps(self) -> int:
        return max(1, self.ocean_wind_steps)


@dataclass
class ClimateLayers:
    """Intermediate layers of one run, all of shape (height, width)."""

    distance_to_coast: np.ndarray
    coastal: np.ndarray
    warm_current: np.ndarray
    cold_current: np.ndarray
    ocean_wind_bonus: np.ndarray
    windward: np.ndarray
    leeward: np.ndarray


def derive_climate_layers(state: GridState, knobs: ClimateKnobs) -> ClimateLayers:
    """
    Compute every layer the classifier reads.

    Reads only the current masks of ``state``; nothing is carried over from
    previous runs.
    """
    logger.info("Deriving climate layers", width=state.width, height=state.height)

    distance = compute_distance_to_coast(state.land)
    coastal = compute_coastal_mask(state.land)
    currents = compute_currents(state.land, coastal)
    ocean_wind_bonus = compute_ocean_wind_bonus(
        state.land, knobs.effective_ocean_wind_steps
    )
    shadow = compute_orographic_shadow(
        state.land,
        state.mountain,
        knobs.shadow_strength,
        knobs.effective_shadow_range,
    )

    return ClimateLayers(
        distance_to_coast=distance,
        coastal=coastal,
        warm_current=currents.warm,
        cold_current=currents.cold,
        ocean_wind_bonus=ocean_wind_bonus,
        windward=shadow.windward,
        leeward=shadow.leeward,
    )
