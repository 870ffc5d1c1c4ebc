"""Tests for biome classification."""

import numpy as np
import pytest

from py_biomes.core.biomes import (
    BIOME_MATRIX,
    BIOMES,
    BiomeClassifier,
    base_humidity_level,
    base_temperature_level,
    biome_counts,
    biome_name,
    compute_biomes,
)
from py_biomes.core.climate import ClimateKnobs
from py_biomes.core.grid import UNCLASSIFIED, GridState

# With height 179, row y sits at latitude 89 - y
HEIGHT = 179
WIDTH = 100


def row_for_latitude(lat):
    return 89 - lat


def neutral_knobs(**overrides):
    """Knobs with every additive modifier switched off."""
    values = dict(
        itcz_floor=False,
        sub_dry=True,
        interior_dist=10**10,
        interior_dry=0,
        coast_hum=0,
        coast_range=0,
        shadow_strength=0,
        shadow_range=1,
        cooling=0,
        ocean_wind_steps=42,
    )
    values.update(overrides)
    return ClimateKnobs(**values)


class TestBiomeTables:
    """Static biome constants."""

    def test_names(self):
        assert len(BIOMES) == 25
        assert len(set(BIOMES)) == 25
        assert BIOMES[0] == "Permanent ice"
        assert BIOMES[24] == "Extreme rainforest"

    def test_matrix_corners(self):
        assert BIOMES[BIOME_MATRIX[0][0]] == "Permanent ice"
        assert BIOMES[BIOME_MATRIX[0][4]] == "Wet glaciers"
        assert BIOMES[BIOME_MATRIX[2][2]] == "Grassland"
        assert BIOMES[BIOME_MATRIX[4][0]] == "Hyper-arid desert"
        assert BIOMES[BIOME_MATRIX[4][4]] == "Extreme rainforest"

    def test_biome_name(self):
        assert biome_name(UNCLASSIFIED) == "Ocean"
        assert biome_name(8) == "Taiga"


class TestBaseLevels:
    """Latitude tiers."""

    @pytest.mark.parametrize(
        "abs_lat,level", [(0, 4), (9.9, 4), (10, 3), (29.9, 3), (30, 2), (39.9, 2), (40, 1), (59.9, 1), (60, 0), (89, 0)]
    )
    def test_temperature_tiers(self, abs_lat, level):
        assert base_temperature_level(abs_lat) == level

    @pytest.mark.parametrize(
        "abs_lat,level", [(0, 3), (12, 3), (12.1, 2), (25, 2), (25.1, 1), (35, 1), (35.1, 2), (60, 2), (60.1, 1), (89, 1)]
    )
    def test_humidity_tiers(self, abs_lat, level):
        assert base_humidity_level(abs_lat) == level


class TestInvariants:
    """Properties that hold for any mask."""

    @pytest.fixture
    def random_state(self):
        rng = np.random.default_rng(7)
        land = rng.random((60, 120)) < 0.55
        mountain = land & (rng.random((60, 120)) < 0.15)
        return GridState.from_masks(land, mountain)

    def test_all_ocean_grid(self):
        state = GridState(width=20, height=10)
        compute_biomes(state)

        assert (state.temperature == UNCLASSIFIED).all()
        assert (state.humidity == UNCLASSIFIED).all()
        assert (state.biome == UNCLASSIFIED).all()

    def test_ocean_iff_unclassified(self, random_state):
        compute_biomes(random_state)
        ocean = ~random_state.land

        assert (random_state.temperature[ocean] == UNCLASSIFIED).all()
        assert (random_state.humidity[ocean] == UNCLASSIFIED).all()
        assert (random_state.biome[ocean] == UNCLASSIFIED).all()
        assert (random_state.biome[random_state.land] != UNCLASSIFIED).all()

    def test_levels_in_bounds(self, random_state):
        compute_biomes(random_state, ClimateKnobs(interior_dry=-9, coast_hum=9, cooling=7))
        land = random_state.land

        assert random_state.temperature[land].min() >= 0
        assert random_state.temperature[land].max() <= 4
        assert random_state.humidity[land].min() >= 0
        assert random_state.humidity[land].max() <= 4

    def test_matrix_consistency(self, random_state):
        compute_biomes(random_state)
        ys, xs = np.nonzero(random_state.land)
        for y, x in zip(ys, xs):
            t = random_state.temperature[y, x]
            h = random_state.humidity[y, x]
            assert random_state.biome[y, x] == BIOME_MATRIX[t][h]

    def test_deterministic(self, random_state):
        compute_biomes(random_state)
        first = (
            random_state.temperature.copy(),
            random_state.humidity.copy(),
            random_state.biome.copy(),
        )
        compute_biomes(random_state)

        assert np.array_equal(first[0], random_state.temperature)
        assert np.array_equal(first[1], random_state.humidity)
        assert np.array_equal(first[2], random_state.biome)

    def test_rerun_reflects_mask_edits(self, random_state):
        compute_biomes(random_state)
        random_state.land[:] = False
        random_state.mountain[:] = False
        compute_biomes(random_state)
        assert (random_state.biome == UNCLASSIFIED).all()

    def test_precondition_violation_raises(self):
        state = GridState(width=4, height=4)
        state.mountain[1, 1] = True
        with pytest.raises(ValueError):
            compute_biomes(state)

    def test_biome_counts_cover_land(self, random_state):
        compute_biomes(random_state)
        counts = biome_counts(random_state)

        assert sum(counts.values()) == int(random_state.land.sum())
        assert set(counts) <= set(BIOMES)


class TestModifiers:
    """Individual steps of the modifier chain on an all-land world."""

    @pytest.fixture
    def continent(self):
        return GridState.from_masks(np.ones((HEIGHT, WIDTH), dtype=bool))

    def test_base_levels_only(self, continent):
        compute_biomes(continent, neutral_knobs())
        y = row_for_latitude(45)

        assert (continent.temperature[y] == 1).all()
        assert (continent.humidity[y] == 2).all()
        assert (continent.biome[y] == BIOME_MATRIX[1][2]).all()

    def test_subtropical_dry_band_override(self, continent):
        y = row_for_latitude(30)

        compute_biomes(continent, neutral_knobs(sub_dry=True))
        assert (continent.humidity[y] == 1).all()

        compute_biomes(continent, neutral_knobs(sub_dry=False))
        assert (continent.humidity[y] == 2).all()

    def test_interior_dryness(self, continent):
        y = row_for_latitude(45)
        compute_biomes(continent, neutral_knobs(interior_dist=54, interior_dry=-1))
        assert (continent.humidity[y] == 1).all()

    def test_mountain_cooling(self, continent):
        y = row_for_latitude(5)
        continent.mountain[y, 50] = True

        compute_biomes(continent, neutral_knobs(cooling=1))
        assert continent.temperature[y, 50] == 3
        assert continent.temperature[y, 10] == 4

        compute_biomes(continent, neutral_knobs(cooling=0))
        assert continent.temperature[y, 50] == 4

    def test_itcz_floor(self, continent):
        equatorial = row_for_latitude(5)
        near = row_for_latitude(14)
        knobs = dict(interior_dist=0, interior_dry=-4)

        compute_biomes(continent, neutral_knobs(**knobs))
        assert (continent.humidity[equatorial] == 0).all()

        compute_biomes(continent, neutral_knobs(itcz_floor=True, **knobs))
        assert (continent.humidity[equatorial] >= 3).all()
        assert (continent.humidity[near] == 2).all()

    @pytest.mark.parametrize("strength", [1, 2])
    def test_rain_shadow_lowers_humidity_by_strength(self, continent, strength):
        # Westerlies at 44°N blow toward (row - 1, col + 1). The cell at
        # column 25 is shadow_range steps downwind of the mountain column.
        continent.mountain[:, 20] = True
        y = row_for_latitude(44)

        compute_biomes(continent, neutral_knobs(shadow_strength=0, shadow_range=5))
        dry = int(continent.humidity[y, 25])
        compute_biomes(continent, neutral_knobs(shadow_strength=strength, shadow_range=5))
        shadowed = int(continent.humidity[y, 25])

        assert dry == 2
        assert shadowed == dry - strength

    def test_windward_side_gets_wetter(self, continent):
        continent.mountain[:, 20] = True
        y = row_for_latitude(44)

        compute_biomes(continent, neutral_knobs(shadow_strength=1, shadow_range=5))
        assert continent.humidity[y, 15] == 3
        # Out of range on both sides
        assert continent.humidity[y, 40] == 2


class TestCoastalEffects:
    """Modifiers that depend on the ocean."""

    @pytest.fixture
    def strip(self):
        """A land strip along 20°N from column 10 to 20."""
        land = np.zeros((HEIGHT, WIDTH), dtype=bool)
        land[row_for_latitude(20), 10:21] = True
        return GridState.from_masks(land)

    def test_currents_shift_temperature(self, strip):
        compute_biomes(strip, neutral_knobs())
        y = row_for_latitude(20)

        assert strip.temperature[y, 10] == 4  # warm west coast
        assert strip.temperature[y, 15] == 3
        assert strip.temperature[y, 20] == 2  # cold east coast

    def test_coastal_bonus(self, strip):
        y = row_for_latitude(20)
        compute_biomes(strip, neutral_knobs(ocean_wind_steps=1))
        base = int(strip.humidity[y, 15])

        compute_biomes(strip, neutral_knobs(ocean_wind_steps=1, coast_hum=1, coast_range=3))
        assert strip.humidity[y, 15] == base + 1

    def test_negative_coast_range_disables_bonus(self, strip):
        y = row_for_latitude(20)
        compute_biomes(strip, neutral_knobs(ocean_wind_steps=1))
        base = strip.humidity.copy()

        compute_biomes(strip, neutral_knobs(ocean_wind_steps=1, coast_hum=1, coast_range=-5))
        assert np.array_equal(strip.humidity, base)
        assert strip.humidity[y, 15] == base[y, 15]

    def test_ocean_wind_exposure(self, strip):
        y = row_for_latitude(20)
        compute_biomes(strip, neutral_knobs(ocean_wind_steps=10))
        # Strip is one row thick, so every upwind step is over the ocean
        assert strip.humidity[y, 15] == 3


class TestClassifier:
    """Classifier object interface."""

    def test_layers_are_kept(self):
        state = GridState.from_masks(np.ones((9, 9), dtype=bool))
        classifier = BiomeClassifier(state)
        layers = classifier.classify()

        assert classifier.layers is layers
        assert layers.distance_to_coast.shape == (9, 9)
        assert classifier.knobs == ClimateKnobs()
