"""
Input/Output Manager (HDF5)
Handles saving and loading the tracker configuration and values to .h5 files.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass, field, fields
import logging
import os
from importlib.metadata import version, PackageNotFoundError
from typing import Dict, Optional

import h5py

# Get module logger
logger = logging.getLogger(__name__)

try:
    APP_VERSION = version("palettetracker")
except PackageNotFoundError:
    APP_VERSION = "0.0.0-dev"


@dataclass
class TrackerConfiguration:
    """Parameters for the tracker interface and model."""
    profile: str
    layout: int = 0
    view: str = "hybrid"
    background: Optional[str] = None
    window_width: Optional[int] = None
    window_height: Optional[int] = None


@dataclass
class SaveData:
    """Data persisted for the tracker between sessions."""
    configuration: TrackerConfiguration
    values: Dict[str, float] = field(default_factory=dict)


class SaveManager:

    @staticmethod
    def save(data: SaveData, filepath: str) -> None:
        logger.debug(f"Saving tracker data to: {filepath}")
        try:
            with h5py.File(filepath, "w") as f:
                f.attrs["version"] = APP_VERSION

                # --- 1. SAVE CONFIGURATION ---
                # unset optional fields are simply not written
                grp_config = f.create_group("configuration")
                for key, val in asdict(data.configuration).items():
                    if val is not None:
                        grp_config.attrs[key] = val

                # --- 2. SAVE VALUES ---
                grp_values = f.create_group("values")
                for track_key, val in data.values.items():
                    grp_values.attrs[track_key] = float(val)

        except Exception as e:
            logger.exception(f"Failed to save tracker data: {e}")
            raise e

    @staticmethod
    def load(filepath: str) -> Optional[SaveData]:
        """
        Load saved data.

        Returns:
            The saved data, or None if there is no save file yet.

        Raises:
            ValueError: The file exists but is not a valid save file.
        """
        if not os.path.exists(filepath):
            logger.debug(f"No save file at: {filepath}")
            return None

        if not h5py.is_hdf5(filepath):
            msg = f"File '{filepath}' is not a valid HDF5 file."
            logger.error(msg)
            raise ValueError(msg)

        with h5py.File(filepath, "r") as f:
            if "configuration" not in f:
                msg = f"File '{filepath}' has no tracker configuration."
                logger.error(msg)
                raise ValueError(msg)

            # --- 1. LOAD CONFIGURATION ---
            known = {fld.name for fld in fields(TrackerConfiguration)}
            loaded_config = {}
            for key, val in f["configuration"].attrs.items():
                if key not in known:
                    logger.warning(f"Ignoring unknown configuration entry '{key}'")
                    continue
                loaded_config[key] = _to_native(val)

            if "profile" not in loaded_config:
                msg = f"File '{filepath}' does not name a profile."
                logger.error(msg)
                raise ValueError(msg)

            # --- 2. LOAD VALUES ---
            values: Dict[str, float] = {}
            if "values" in f:
                for track_key, val in f["values"].attrs.items():
                    values[track_key] = _to_native(val)

        logger.debug(f"Loaded {len(values)} values for profile '{loaded_config['profile']}'.")
        return SaveData(configuration=TrackerConfiguration(**loaded_config), values=values)

    @staticmethod
    def clear(filepath: str) -> None:
        """Delete the save file if it exists."""
        if os.path.exists(filepath):
            os.remove(filepath)
            logger.info(f"Save data cleared: {filepath}")


def _to_native(val):
    # HDF5 often saves as numpy types, convert to native python
    if isinstance(val, bytes):
        return val.decode("utf-8")
    if hasattr(val, "item"):
        return val.item()
    return val
