"""
Core climate and biome functionality.
"""

from .grid import GridConfig, GridState, ClassifiedCell
from .climate import ClimateKnobs, ClimateLayers, derive_climate_layers
from .biomes import BIOMES, BIOME_MATRIX, BiomeClassifier, compute_biomes, biome_counts
from .mask_io import parse_mask, format_mask

__all__ = ['GridConfig', 'GridState', 'ClassifiedCell',
           'ClimateKnobs', 'ClimateLayers', 'derive_climate_layers',
           'BIOMES', 'BIOME_MATRIX', 'BiomeClassifier', 'compute_biomes', 'biome_counts',
           'parse_mask', 'format_mask']
