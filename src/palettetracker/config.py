"""
Configuration & Path Management
===============================
This module serves as the central registry for file paths and global constants.

Why is this file needed?
------------------------
1. Abstraction: It keeps the palette dimensions and the save location in one
   place instead of scattering magic numbers through the views.
2. Deployment: The save file location can be overridden with the
   PALETTETRACKER_SAVE environment variable (e.g. one file per stream setup).

Exports:
    DEFAULT_SAVE_PATH (str): Absolute path to the save file.
"""
import os
from pathlib import Path

# Hexagon sizes (horizontal radius, in scene units)
EDGE_HEX_SIZE: float = 50.0       # outer border drawn around the palette
CONTAINER_HEX_SIZE: float = 46.0  # cell placement, includes the gap between cells
CELL_HEX_SIZE: float = 42.0       # visible cell

# Extra margin so the outer border always has positive coordinates
DEFAULT_GLOBAL_MARGIN: float = 5.0

# Margin between palettes when using a separate input palette
PALETTE_SPACING: float = 20.0

# Increment controls, relative to the cell centre
INCREMENT_CONTROL_OFFSET_X: float = 22.0
INCREMENT_CONTROL_OFFSET_Y: float = 31.0
INCREMENT_CONTROL_SPACING: float = 15.0

DEFAULT_PROFILE: str = "ep1-glitchless-any%-fonewm"
SAVE_FILE_NAME: str = ".palettetracker-save.h5"


def get_save_path() -> str:
    """
    Get absolute path of the save file.
    """
    override = os.environ.get("PALETTETRACKER_SAVE")
    if override:
        return os.path.abspath(override)
    return os.path.join(str(Path.home()), SAVE_FILE_NAME)


DEFAULT_SAVE_PATH: str = get_save_path()
