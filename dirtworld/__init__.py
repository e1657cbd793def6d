"""Grid world of cells and forms, with actors, movement, digging, groundwater simulation and map generation."""

__version__ = "0.1.0"