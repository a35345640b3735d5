"""
Tracker Session
===============
Wires a profile, the value model, the key controller and the save file
together for one run of the application.

Why is this file needed?
------------------------
1. Ownership: The session owns the model instance. Nothing in the package
   keeps a module-level model, so several sessions (e.g. in tests) never
   share state.
2. Persistence: It restores saved values when the saved profile matches the
   requested one and saves the values again after every change.
"""
from __future__ import annotations

import logging
from typing import Optional

from palettetracker.controller.key_controller import KeyController
from palettetracker.model.exceptions import UnknownTrackable
from palettetracker.model.io import SaveData, SaveManager, TrackerConfiguration
from palettetracker.model.profiles import PaletteProfile, TrackerLayout, get_profile
from palettetracker.model.state import ChangeEvent, TrackerModel

logger = logging.getLogger(__name__)


class TrackerSession:
    """
    State of one tracking session.

    Args:
        configuration: Profile, layout and view to use.
        save_path: Save file to restore from and write to. None disables persistence.
        key_input: Create a KeyController for the session's layout.
    """

    def __init__(
        self,
        configuration: TrackerConfiguration,
        save_path: Optional[str] = None,
        key_input: bool = True
    ) -> None:
        self.configuration = configuration
        self.save_path = save_path

        self.profile: PaletteProfile = get_profile(configuration.profile)
        self.layout: TrackerLayout = self.profile.get_layout(configuration.layout)

        self.model = TrackerModel()
        self.model.initialize(self.profile.trackables)

        self.key_controller: Optional[KeyController] = None
        if key_input:
            self.key_controller = KeyController(self.model)
            self.key_controller.initialize(self.layout)

        self.restored = self._restore()
        self._autosave_handler = None
        if self.save_path is not None:
            self._autosave_handler = self.model.register_change_handler(self._on_change)
        logger.info(f"Session started: profile '{self.profile.key}', layout {configuration.layout}.")

    def _restore(self) -> bool:
        """Apply saved values if the save file belongs to the same profile."""
        if self.save_path is None:
            return False

        try:
            saved = SaveManager.load(self.save_path)
        except (OSError, ValueError) as e:
            logger.warning(f"Ignoring unreadable save file: {e}")
            return False

        if saved is None:
            return False
        if saved.configuration.profile != self.profile.key:
            logger.info(
                f"Saved values belong to profile '{saved.configuration.profile}', starting fresh."
            )
            return False

        try:
            self.model.restore(saved.values)
        except (UnknownTrackable, ValueError) as e:
            logger.warning(f"Discarding saved values: {e}")
            self.model.reset_values()
            return False

        if self.configuration.window_width is None and self.configuration.window_height is None:
            self.configuration.window_width = saved.configuration.window_width
            self.configuration.window_height = saved.configuration.window_height
        logger.info(f"Restored {len(saved.values)} values from {self.save_path}.")
        return True

    def _on_change(self, event: ChangeEvent) -> None:
        if event.changed:
            self.save()

    def save(self) -> None:
        if self.save_path is None:
            return
        SaveManager.save(
            SaveData(configuration=self.configuration, values=self.model.snapshot()),
            self.save_path
        )

    def reset(self) -> None:
        """Reset every value to its minimum and persist the result."""
        self.model.reset_values()
        self.save()

    def remember_window_size(self, width: int, height: int) -> None:
        self.configuration.window_width = width
        self.configuration.window_height = height
        self.save()

    def close(self) -> None:
        if self._autosave_handler is not None:
            self.model.unregister_change_handler(self._autosave_handler)
            self._autosave_handler = None
