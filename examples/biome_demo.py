"""
Example demonstrating biome classification of a painted mask.

Usage:
    python examples/biome_demo.py                      # built-in continent
    python examples/biome_demo.py my_mask.txt --png out.png --shadow-range 24
"""

import argparse
from typing import Optional

import matplotlib.pyplot as plt
import numpy as np

from py_biomes.config import settings
from py_biomes.core import ClimateKnobs, GridState, biome_counts, compute_biomes
from py_biomes.core.brush import MOUNTAIN, paint
from py_biomes.core.mask_io import load_mask
from py_biomes.core.palette import LATITUDE_LINES, biome_rgb, latitude_row


def demo_continent(width: Optional[int] = None, height: Optional[int] = None) -> GridState:
    """A single continent spanning both hemispheres with a north-south range."""
    width = width or settings.default_grid_width
    height = height or settings.default_grid_height
    state = GridState(width=width, height=height)

    # Shapes are laid out on a 360x180 reference map and scaled to the grid
    scale = height / 180.0
    step = max(1, round(6 * scale))
    for y in range(round(20 * scale), height - round(20 * scale), step):
        wobble = round(((y / scale) % 30 - 15) * scale)
        paint(state, width // 3 + wobble, y, radius=round(18 * scale))
    for y in range(round(30 * scale), height - round(30 * scale), max(1, round(3 * scale))):
        paint(state, width // 3 + round(4 * scale), y, radius=round(2 * scale), mode=MOUNTAIN)
    return state


def main():
    defaults = ClimateKnobs()
    parser = argparse.ArgumentParser(description="Classify a land/mountain mask into biomes")
    parser.add_argument("mask", nargs="?", help="Mask file ('.' ocean, '#' land, '^' mountain)")
    parser.add_argument("--png", help="Write the biome map to this PNG file")
    parser.add_argument("--width", type=int, default=settings.default_grid_width)
    parser.add_argument("--height", type=int, default=settings.default_grid_height)
    parser.add_argument("--coast-range", type=int, default=defaults.coast_range)
    parser.add_argument("--interior-dist", type=int, default=defaults.interior_dist)
    parser.add_argument("--shadow-range", type=int, default=defaults.shadow_range)
    parser.add_argument("--ocean-wind-steps", type=int, default=defaults.ocean_wind_steps)
    parser.add_argument("--no-itcz-floor", action="store_true")
    parser.add_argument("--no-sub-dry", action="store_true")
    args = parser.parse_args()

    state = load_mask(args.mask) if args.mask else demo_continent(args.width, args.height)
    knobs = ClimateKnobs(
        itcz_floor=not args.no_itcz_floor,
        sub_dry=not args.no_sub_dry,
        coast_range=args.coast_range,
        interior_dist=args.interior_dist,
        shadow_range=args.shadow_range,
        ocean_wind_steps=args.ocean_wind_steps,
    )

    print(f"Classifying {state.width}x{state.height} grid...")
    compute_biomes(state, knobs)

    land_cells = int(np.sum(state.land))
    print(f"Land cells: {land_cells}")
    for name, count in biome_counts(state).items():
        print(f"  {name:<22} {count:>7}  ({100.0 * count / land_cells:5.1f}%)")

    if args.png:
        fig, ax = plt.subplots(figsize=(12, 6))
        ax.imshow(biome_rgb(state), interpolation="nearest")
        for lat in LATITUDE_LINES:
            ax.axhline(latitude_row(lat, state.height), color="white", alpha=0.2, linewidth=0.8)
        ax.set_title("Biomes")
        ax.set_axis_off()
        fig.savefig(args.png, dpi=150, bbox_inches="tight")
        print(f"Saved {args.png}")


if __name__ == "__main__":
    main()
