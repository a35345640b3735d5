"""Predefined Palette Profiles (Catalog) - Speedrun Categories."""
from __future__ import annotations

from dataclasses import dataclass, field
import logging
from typing import Any, Dict, List, Mapping, Tuple

from palettetracker.model.exceptions import UnknownProfile, UnknownTrackable
from palettetracker.model.hex_geometry import HexCoord
from palettetracker.model.trackables import BASE_TRACKABLES, TrackableData

logger = logging.getLogger(__name__)


# ------------------------------------------------------------------------------
# Data Structures
# ------------------------------------------------------------------------------
@dataclass(frozen=True)
class LayoutEntry:
    """
    Maps a trackable to grid coordinates and a keybinding.

    `code` is a symbolic key code such as "KeyQ" or "Digit1".
    """
    x: int
    y: int
    code: str

    @property
    def coord(self) -> HexCoord:
        return HexCoord(self.x, self.y)


TrackerLayout = Dict[str, LayoutEntry]


@dataclass(frozen=True)
class PaletteProfile:
    """
    A collection of trackables with extra parameters and preset layouts.
    """
    key: str
    name: str
    trackables: Dict[str, TrackableData]
    layouts: List[TrackerLayout] = field(default_factory=list)

    def get_layout(self, index: int) -> TrackerLayout:
        if not 0 <= index < len(self.layouts):
            raise IndexError(f"Profile '{self.key}' has no layout {index} ({len(self.layouts)} available)")
        return self.layouts[index]


def build_profile(
    key: str,
    name: str,
    trackables: Mapping[str, Mapping[str, Any]],
    layouts: List[Mapping[str, Tuple[int, int, str]]],
    base: Mapping[str, TrackableData] = BASE_TRACKABLES
) -> PaletteProfile:
    """
    Create a profile by extending base trackables with profile attributes.

    Args:
        key: Profile key.
        name: Display name.
        trackables: Attribute overrides keyed by base trackable id.
        layouts: Layouts as {trackable id: (x, y, key code)}.
        base: Catalog the profile trackables extend.

    Raises:
        UnknownTrackable: The profile or one of its layouts references an
            undefined trackable.
        ValueError: A layout uses a cell or a key code twice.
    """
    resolved: Dict[str, TrackableData] = {}
    for track_key, overrides in trackables.items():
        if track_key not in base:
            raise UnknownTrackable(track_key, "the base trackables")
        resolved[track_key] = base[track_key].with_overrides(overrides)

    for track_key, data in resolved.items():
        for other in data.target_unless:
            if other not in resolved:
                raise UnknownTrackable(other, f"profile '{key}'")

    parsed_layouts: List[TrackerLayout] = []
    for index, raw_layout in enumerate(layouts):
        layout: TrackerLayout = {}
        cells = set()
        codes = set()
        for track_key, (x, y, code) in raw_layout.items():
            if track_key not in resolved:
                raise UnknownTrackable(track_key, f"profile '{key}'")
            if (x, y) in cells:
                raise ValueError(f"Layout {index} of '{key}' places two trackables at ({x}, {y})")
            if code in codes:
                raise ValueError(f"Layout {index} of '{key}' binds '{code}' twice")
            cells.add((x, y))
            codes.add(code)
            layout[track_key] = LayoutEntry(x=x, y=y, code=code)
        parsed_layouts.append(layout)

    return PaletteProfile(key=key, name=name, trackables=resolved, layouts=parsed_layouts)


# ------------------------------------------------------------------------------
# Shared layouts
# ------------------------------------------------------------------------------
_FORCE_GRID = {
    "foie": (0, 0, "Digit1"), "gifoie": (1, 0, "Digit2"), "rafoie": (2, 0, "Digit3"), "mst": (3, 0, "Digit4"),
    "barta": (0, 1, "KeyQ"), "gibarta": (1, 1, "KeyW"), "rabarta": (2, 1, "KeyE"), "barrier": (3, 1, "KeyR"),
    "zonde": (0, 2, "KeyA"), "gizonde": (1, 2, "KeyS"), "razonde": (2, 2, "KeyD"), "slots": (3, 2, "KeyF"),
    "hp": (2, 3, "KeyC"),
}

_FORCE_DIAGONAL = {
    "zonde": (0, 1, "Digit1"), "barta": (1, 0, "Digit2"), "foie": (2, 0, "Digit3"),
    "gizonde": (0, 2, "KeyQ"), "gibarta": (1, 1, "KeyW"), "gifoie": (2, 1, "KeyE"),
    "razonde": (0, 3, "KeyA"), "rabarta": (1, 2, "KeyS"), "rafoie": (2, 2, "KeyD"),
    "hp": (0, 4, "KeyZ"), "slots": (1, 3, "KeyX"), "barrier": (2, 3, "KeyC"),
}

_FORCE_WIDE = {
    "foie": (0, 0, "Digit1"), "gifoie": (1, 0, "Digit2"), "rafoie": (2, 0, "Digit3"), "mst": (3, 0, "Digit4"),
    "hp": (4, 0, "Digit5"),
    "barta": (0, 1, "KeyQ"), "gibarta": (1, 1, "KeyW"), "rabarta": (2, 1, "KeyE"), "barrier": (3, 1, "KeyR"),
    "slots": (4, 1, "KeyT"),
    "zonde": (0, 2, "KeyA"), "gizonde": (1, 2, "KeyS"), "razonde": (2, 2, "KeyD"),
}

_FORCE_TECHNIQUES_ONLY = {
    key: entry for key, entry in _FORCE_DIAGONAL.items() if key not in ("hp", "slots", "barrier")
}

_HUNTER_GRID = {
    "saber": (0, 0, "Digit1"), "dagger": (1, 0, "Digit2"), "sword": (2, 0, "Digit3"), "partisan": (3, 0, "Digit4"),
    "handgun": (0, 1, "KeyQ"), "ata": (2, 1, "KeyE"), "atp": (3, 1, "KeyR"),
}

_HUNTER_COLUMN = {
    "saber": (0, 0, "Digit1"), "dagger": (0, 1, "Digit2"), "sword": (0, 2, "Digit3"),
    "partisan": (0, 3, "Digit4"), "handgun": (0, 4, "KeyQ"),
}

_FORCE_GOALS = {
    "foie": {"min": 1},
    "barta": {"target": 1},
    "zonde": {"target": 1},
    "gifoie": {"target": 1, "target_unless": ["rafoie"]},
    "gibarta": {},
    "gizonde": {"target": 1},
    "rafoie": {"target": 1},
    "rabarta": {"target": 1},
    "razonde": {"target": 1},
    "hp": {},
    "mst": {},
    "slots": {},
    "barrier": {"target": 1},
}


def _any_percent_force(hp_target: int, slots_target: int, barrier: Dict[str, Any]) -> Dict[str, Dict[str, Any]]:
    return {
        "foie": {"min": 1},
        "barta": {"target": 1},
        "zonde": {"target": 1},
        "gifoie": {"target": 1, "target_unless": ["rafoie"]},
        "gibarta": {},
        "gizonde": {"target": 1},
        "rafoie": {},
        "rabarta": {},
        "razonde": {},
        "hp": {"target": hp_target},
        "mst": {},
        "slots": {"target": slots_target, "target_unless": ["hp"]},
        "barrier": barrier,
    }


# ------------------------------------------------------------------------------
# Catalog
# ------------------------------------------------------------------------------
_PROFILE_DEFINITIONS: List[Dict[str, Any]] = [
    {
        "key": "ep1-glitchless-any%-fonewm",
        "name": "Episode 1 Glitchless Any% FOnewm",
        "trackables": _any_percent_force(hp_target=21, slots_target=2, barrier={}),
        "layouts": [
            _FORCE_GRID,
            {**_FORCE_DIAGONAL, "mst": (2, 4, "KeyV")},
            _FORCE_WIDE,
            _FORCE_TECHNIQUES_ONLY,
        ],
    },
    {
        "key": "ep1-glitchless-any%-fonewearl",
        "name": "Episode 1 Glitchless Any% FOnewearl",
        "trackables": _any_percent_force(hp_target=39, slots_target=4, barrier={"target": 1}),
        "layouts": [
            _FORCE_GRID,
            {**_FORCE_DIAGONAL, "mst": (3, 2, "KeyV")},
            _FORCE_WIDE,
        ],
    },
    {
        "key": "ep1-glitchless-allMissions-force",
        "name": "Episode 1 Glitchless All Missions Force",
        "trackables": _FORCE_GOALS,
        "layouts": [
            _FORCE_GRID,
            {**_FORCE_DIAGONAL, "mst": (3, 2, "KeyV")},
            _FORCE_WIDE,
            {
                "foie": (0, 0, "Digit1"), "gifoie": (1, 0, "Digit2"), "rafoie": (0, 1, "Digit3"),
                "barta": (1, 1, "KeyQ"), "gibarta": (2, 0, "KeyW"), "rabarta": (2, 1, "KeyE"),
                "zonde": (3, 0, "KeyA"), "gizonde": (3, 1, "KeyS"), "razonde": (4, 0, "KeyD"),
                "mst": (4, 1, "Digit4"), "slots": (5, 0, "KeyT"),
            },
        ],
    },
    {
        "key": "ep1-glitchless-allMissions-force-soulEater",
        "name": "Episode 1 Glitchless All Missions Force + Soul Eater",
        "trackables": {**_FORCE_GOALS, "souleater": {"target": 1}},
        "layouts": [
            _FORCE_GRID,
            {**_FORCE_DIAGONAL, "mst": (3, 2, "KeyV")},
            {**_FORCE_WIDE, "souleater": (4, 2, "KeyG")},
        ],
    },
    {
        "key": "ep2-glitchless-force",
        "name": "Episode 2 Glitchless Force",
        "trackables": {
            **_FORCE_GOALS,
            "foie": {"min": 1, "target": 3},
            "barta": {"target": 2},
            "razonde": {},
            "hp": {"target": 31},
            "slots": {"target": 3},
            "scape": {},
        },
        "layouts": [
            {**_FORCE_GRID, "scape": (4, 2, "KeyV")},
            {**_FORCE_DIAGONAL, "mst": (3, 2, "KeyV"), "scape": (4, 2, "KeyB")},
            {**_FORCE_WIDE, "scape": (4, 2, "KeyV")},
        ],
    },
    {
        "key": "ep1-glitchless-any%-hucaseal",
        "name": "Episode 1 Glitchless Any% HUcaseal",
        "trackables": {
            "saber": {"min": 1, "target": 2},
            "dagger": {"target": 2},
            "sword": {"target": 1},
            "partisan": {"target": 1},
            "handgun": {"target": 3},
            "slots": {"target": 3},
            "ata": {},
            "atp": {},
        },
        "layouts": [
            {**_HUNTER_GRID, "slots": (1, 1, "KeyW")},
            _HUNTER_COLUMN,
        ],
    },
    {
        "key": "ep1-glitchless-any%-hucast",
        "name": "Episode 1 Glitchless Any% HUcast",
        "trackables": {
            "saber": {"min": 1, "target": 3},
            "dagger": {"target": 2},
            "sword": {"target": 2},
            "partisan": {"target": 1},
            "handgun": {"target": 2},
            "mechgun": {},
            "ata": {},
            "atp": {},
        },
        "layouts": [
            {**_HUNTER_GRID, "mechgun": (1, 1, "KeyW")},
            _HUNTER_COLUMN,
        ],
    },
    {
        "key": "ep1-glitchless-any%-hucast-souleater",
        "name": "Episode 1 Glitchless Any% HUcast w/Soul Eater",
        "trackables": {
            "saber": {"min": 1, "target": 3},
            "dagger": {"target": 2},
            "sword": {"target": 2},
            "partisan": {"target": 1},
            "handgun": {"target": 3},
            "slots": {},
            "ata": {},
            "atp": {},
            "souleater": {"target": 1},
        },
        "layouts": [
            {**_HUNTER_GRID, "slots": (1, 1, "KeyW"), "souleater": (2, 2, "KeyF")},
        ],
    },
    {
        "key": "ep1-glitchless-true-dark-falz",
        "name": "Episode 1 Glitchless True Dark Falz HUcast",
        "trackables": {
            "saber": {"min": 1, "target": 4},
            "dagger": {"target": 3},
            "sword": {"target": 3},
            "partisan": {"target": 3},
            "handgun": {"target": 4},
            "hp": {"target": 10},
            "slots": {"target": 3},
            "grants-damage": {},
            "ata": {},
            "atp": {},
        },
        "layouts": [
            {
                **_HUNTER_GRID, "hp": (1, 1, "KeyW"),
                "slots": (4, 0, "Digit5"), "grants-damage": (4, 1, "KeyT"),
            },
            _HUNTER_COLUMN,
        ],
    },
    {
        "key": "ep1-glitched-any%",
        "name": "Glitched Any%",
        "trackables": {
            "saber-glitched": {},
            "handgun": {},
            "rifle": {},
            "mechgun": {"target": 1},
            "shot": {"target": 1},
            "ata": {},
        },
        "layouts": [
            {
                "saber-glitched": (0, 0, "Digit1"), "rifle": (1, 0, "Digit2"), "mechgun": (2, 0, "Digit3"),
                "shot": (2, 1, "Digit4"), "handgun": (0, 1, "KeyQ"), "ata": (1, 1, "KeyE"),
            },
        ],
    },
    {
        "key": "three-class-relay",
        "name": "Three Class Relay",
        "trackables": {**_FORCE_GOALS, "handgun": {"target": 3}, "shot": {"target": 1}},
        "layouts": [
            {**_FORCE_WIDE, "handgun": (3, 2, "KeyG"), "shot": (4, 2, "KeyF")},
        ],
    },
]

ALL_PROFILES: Dict[str, PaletteProfile] = {
    definition["key"]: build_profile(**definition) for definition in _PROFILE_DEFINITIONS
}


def get_profile(key: str) -> PaletteProfile:
    try:
        profile = ALL_PROFILES[key]
    except KeyError:
        raise UnknownProfile(f"Profile '{key}' is not in the catalog") from None
    logger.debug(f"Profile '{key}' has {len(profile.trackables)} trackables, {len(profile.layouts)} layouts.")
    return profile
