"""Trackable Definitions (Catalog)."""
from __future__ import annotations

from dataclasses import dataclass, replace, fields
from typing import Any, Dict, Mapping, Optional, Tuple


@dataclass(frozen=True)
class TrackableData:
    """
    Attributes for an item that can be recorded on the tracker.

    Only the value-related fields take part in the model logic.
    `description` and `label` are read by the palette and the status bar.
    """
    min: float = 0
    max: Optional[float] = None
    toggle: bool = False
    target: Optional[float] = None
    target_unless: Tuple[str, ...] = ()
    increment: Tuple[float, ...] = (1,)

    description: Optional[str] = None
    label: Optional[str] = None

    def __post_init__(self) -> None:
        if not self.increment:
            raise ValueError("'increment' needs at least one step size")
        if any(step <= 0 for step in self.increment):
            raise ValueError(f"'increment' steps must be positive, got {self.increment}")
        if self.max is not None and not self.toggle and self.max < self.min:
            raise ValueError(f"'max' ({self.max}) is lower than 'min' ({self.min})")

    @property
    def effective_min(self) -> float:
        return 0 if self.toggle else self.min

    @property
    def effective_max(self) -> Optional[float]:
        """Upper bound of the value, None when unbounded."""
        return 1 if self.toggle else self.max

    def clamp(self, value: float) -> float:
        """Clamp a value into [effective_min, effective_max]."""
        upper = self.effective_max
        if upper is not None and value > upper:
            return upper
        if value < self.effective_min:
            return self.effective_min
        return value

    def with_overrides(self, overrides: Mapping[str, Any]) -> TrackableData:
        """Return a copy with some attributes replaced (profile extension)."""
        return replace(self, **_normalize(overrides))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> TrackableData:
        return cls(**_normalize(data))


_FIELD_NAMES = {f.name for f in fields(TrackableData)}
_ALIASES = {"targetUnless": "target_unless"}


def _normalize(data: Mapping[str, Any]) -> Dict[str, Any]:
    """Accept camelCase keys and list values from hand-written catalogs."""
    result: Dict[str, Any] = {}
    for key, value in data.items():
        key = _ALIASES.get(key, key)
        if key not in _FIELD_NAMES:
            raise ValueError(f"Unknown trackable attribute '{key}'")
        if key in ("target_unless", "increment"):
            value = tuple(value)
        result[key] = value
    return result


# ------------------------------------------------------------------------------
# Base catalog. Profiles extend these entries with their own attributes.
# ------------------------------------------------------------------------------
_RAW_TRACKABLES: Dict[str, Dict[str, Any]] = {
    "foie": {"max": 30, "description": "Foie"},
    "barta": {"max": 30, "description": "Barta"},
    "zonde": {"max": 30, "description": "Zonde"},
    "gifoie": {"max": 30, "description": "Gifoie"},
    "gibarta": {"max": 30, "description": "Gibarta"},
    "gizonde": {"max": 30, "description": "Gizonde"},
    "rafoie": {"max": 30, "description": "Rafoie"},
    "rabarta": {"max": 30, "description": "Rabarta"},
    "razonde": {"max": 30, "description": "Razonde"},
    "resta": {"max": 30, "description": "Resta", "label": "Resta"},
    "grants-damage": {"max": 311, "increment": [1, 15.55], "description": "Grants Damage Taken"},
    "hp": {"max": 650, "increment": [1, 2, 10], "label": "HP+", "description": "HP Boost"},
    "mst": {"max": 1100, "increment": [1, 2, 5], "label": "MST+", "description": "MST Boost"},
    "atp": {"max": 1100, "increment": [1, 2, 5], "label": "ATP+", "description": "ATP Boost"},
    "ata": {"max": 200, "increment": [0.5, 1], "label": "ATA+", "description": "ATA Boost"},
    "slots": {"max": 4, "description": "Frame Slots"},
    "barrier": {"toggle": True, "description": "Barrier Obtained?"},
    "souleater": {"toggle": True, "description": "Soul Eater"},
    "handgun": {"max": 5, "description": "Handgun"},
    "mechgun": {"max": 5, "description": "Mechgun"},
    "saber": {"max": 5, "description": "Saber"},
    "saber-glitched": {"max": 30, "description": "Saber"},
    "sword": {"max": 5, "description": "Sword"},
    "partisan": {"max": 5, "description": "Partisan"},
    "dagger": {"max": 5, "description": "Dagger"},
    "shot": {"max": 5, "description": "Shot"},
    "rifle": {"max": 5, "description": "Rifle"},
    "scape": {"description": "Scape Doll", "label": "Scape Doll"},
}

BASE_TRACKABLES: Dict[str, TrackableData] = {
    key: TrackableData.from_dict(raw) for key, raw in _RAW_TRACKABLES.items()
}
