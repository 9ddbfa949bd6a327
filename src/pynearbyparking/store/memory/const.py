"""Constants for the in-memory store."""

# Roughly 5.5 km of latitude per cell, about one default search radius.
GRID_CELL_SIZE_DEG = 0.05
