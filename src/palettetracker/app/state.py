from __future__ import annotations

from typing import Dict, Optional

from PySide6.QtCore import QObject, Signal

from palettetracker.controller.key_controller import InputEvent, KeyController
from palettetracker.model.state import ChangeEvent, TrackerModel


class Store(QObject):
    """
    Qt side of the tracker model.

    Re-emits model and key controller callbacks as signals so widgets can
    connect to them. Connections are direct, so the signals fire inside the
    model call, in the same order as the model notifications.
    """
    value_changed = Signal(object)        # ChangeEvent
    goal_changed = Signal(str, bool)      # track key, fulfilled
    input_changed = Signal(object)        # InputEvent

    def __init__(self, model: TrackerModel, key_controller: Optional[KeyController] = None) -> None:
        super().__init__()
        self.model = model
        self.key_controller = key_controller

        self._goals: Dict[str, bool] = {
            key: model.goal_status(key).fulfilled for key in model.trackables
        }
        self._change_handler = model.register_change_handler(self._on_model_change)
        self._input_handler = None
        if key_controller is not None:
            self._input_handler = key_controller.register_input_handler(self._on_input)

    def goal_fulfilled(self, track_key: str) -> bool:
        return self._goals[track_key]

    def detach(self) -> None:
        """Stop listening to the model and key controller."""
        self.model.unregister_change_handler(self._change_handler)
        if self.key_controller is not None and self._input_handler is not None:
            self.key_controller.unregister_input_handler(self._input_handler)
            self._input_handler = None

    def _on_model_change(self, event: ChangeEvent) -> None:
        # goal cache first, slots of value_changed read it
        fulfilled = self.model.goal_status(event.track_key).fulfilled
        flipped = self._goals.get(event.track_key) != fulfilled
        self._goals[event.track_key] = fulfilled

        self.value_changed.emit(event)
        if flipped:
            self.goal_changed.emit(event.track_key, fulfilled)

    def _on_input(self, event: InputEvent) -> None:
        self.input_changed.emit(event)
