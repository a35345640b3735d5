"""
Key Controller
==============
Translates key presses into model increments.

The controller works with symbolic key codes ("KeyQ", "Digit1", "AltLeft",
"ShiftRight", ...) so it does not depend on a GUI toolkit; the main window
converts Qt key events to these codes.

Modifiers:
    Alt   -> increment level +1
    Ctrl  -> increment level +2
    Shift -> subtract instead of add
"""
from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Callable, Dict, List, Mapping, Optional

from palettetracker.model.profiles import LayoutEntry
from palettetracker.model.state import TrackerModel

logger = logging.getLogger(__name__)

MAX_INPUT_LEVEL = 3


@dataclass(frozen=True)
class InputEvent:
    """User input that may interest palettes. `track_key` is None for modifier-only input."""
    track_key: Optional[str] = None


InputHandler = Callable[[InputEvent], None]


class KeyController:
    def __init__(self, model: TrackerModel) -> None:
        if not isinstance(model, TrackerModel):
            raise TypeError("Expected a TrackerModel for the model parameter")
        self.model = model

        self._input_level: int = 0
        self._input_factor: int = 1
        self._input_level_override: Dict[str, Optional[int]] = {}
        self._code_to_trackable: Dict[str, str] = {}
        self._trackable_to_code: Dict[str, str] = {}
        self._input_handlers: List[InputHandler] = []

    @property
    def input_factor(self) -> int:
        """1 or -1. Affected by the Shift key."""
        return self._input_factor

    @property
    def input_level(self) -> int:
        """Highest increment level used when affecting the model (0 to 3)."""
        return self._input_level

    def initialize(self, layout: Mapping[str, LayoutEntry]) -> None:
        """Set keybindings from a layout."""
        self._code_to_trackable = {}
        self._trackable_to_code = {}
        for track_key, entry in layout.items():
            self._code_to_trackable[entry.code] = track_key
            self._trackable_to_code[track_key] = entry.code
        logger.debug(f"Key bindings set for {len(self._code_to_trackable)} trackables.")

    # ------------------------------------------------------------------------------
    # Input handlers
    # ------------------------------------------------------------------------------

    def register_input_handler(self, handler: InputHandler) -> InputHandler:
        if not callable(handler):
            raise TypeError("Expected a callable as the handler")
        self._input_handlers.append(handler)
        return handler

    def unregister_input_handler(self, handler: InputHandler) -> None:
        try:
            self._input_handlers.remove(handler)
        except ValueError:
            pass

    def _fire(self, track_key: Optional[str]) -> None:
        event = InputEvent(track_key=track_key)
        for handler in list(self._input_handlers):
            handler(event)

    # ------------------------------------------------------------------------------
    # Key events
    # ------------------------------------------------------------------------------

    def get_input_level(self, track_key: str) -> int:
        """
        Increment level used if a trackable's key is pressed.

        An override set with `override_input_level` wins, otherwise the
        modifier level is clamped to the trackable's increment steps.
        """
        override = self._input_level_override.get(track_key)
        if override is not None:
            return override
        increments = self.model.get_attribute(track_key, "increment", (1,))
        return min(self._input_level, len(increments) - 1)

    def override_input_level(self, track_key: str, level: Optional[int]) -> None:
        """Force a level for one trackable (e.g. while hovering a control). None releases it."""
        self._input_level_override[track_key] = level

    def on_key_down(self, code: str, alt: bool = False, ctrl: bool = False, shift: bool = False) -> bool:
        """
        Handle a key press.

        Returns:
            True if the key was used (the caller should not propagate it further).
        """
        self._input_level = (1 if alt else 0) + (2 if ctrl else 0)
        self._input_factor = -1 if shift else 1

        handled = code.startswith(("Alt", "Control")) or shift
        track_key = self._code_to_trackable.get(code)
        if track_key is not None:
            handled = True
            self.model.increment_value(track_key, self.get_input_level(track_key), self._input_factor)

        if handled:
            self._fire(track_key)
        return handled

    def on_key_up(self, code: str) -> bool:
        """Reset modifier state when a modifier key is released."""
        shift = code.startswith("Shift")
        if not shift and not code.startswith(("Alt", "Control")):
            return False
        if shift:
            self._input_factor = 1
        self._input_level = 0
        self._fire(None)
        return True

    # ------------------------------------------------------------------------------
    # Display text
    # ------------------------------------------------------------------------------

    def get_key_code(self, track_key: str) -> Optional[str]:
        return self._trackable_to_code.get(track_key)

    def get_key_code_display_text(self, track_key: str, increment_level: int = 0) -> str:
        """
        Text conveying which key combination controls a trackable at a level.

        Returns an empty string if no control is available.
        """
        if increment_level < 0 or increment_level > MAX_INPUT_LEVEL:
            return ""

        text = self.get_key_code(track_key)
        if not text:
            return ""

        # assumes a QWERTY keyboard layout
        if text.startswith("Key"):
            text = text[len("Key"):]
        elif text.startswith("Digit"):
            text = text[len("Digit"):]

        if increment_level & 2:
            text = "Ctrl+" + text
        if increment_level & 1:
            text = "Alt+" + text
        return text

    def get_all_increments_display_text(self, track_key: str) -> str:
        """Controls for every increment level of a trackable, for the status bar."""
        if self.model.get_attribute(track_key, "toggle", False):
            key = self.get_key_code_display_text(track_key)
            return f"On:[{key}] Off:[Shift+{key}]"

        increments = self.model.get_attribute(track_key, "increment", (1,))
        parts = [
            f"+{step:g}:[{self.get_key_code_display_text(track_key, level)}]"
            for level, step in enumerate(increments)
        ]
        if not parts:
            return ""
        return ", ".join(parts) + " (Shift to subtract)"
