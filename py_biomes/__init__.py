"""Climate biome classification for hand-painted world maps."""

__version__ = "0.1.0"
