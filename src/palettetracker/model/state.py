"""
Tracker State (Data Model)
==========================
This module defines the central value store for a tracking session.

Why is this file needed?
------------------------
1. State Management: It holds the current value of every trackable in one
   place. One instance is created per session and passed to the controllers
   and the palettes (no global instance).
2. Rules: It enforces the value bounds, resolves increment levels and
   evaluates goals, including the `target_unless` overrides.
3. Notification: Views register change handlers and are called back for
   every value that is set.

Re-entrancy contract
--------------------
Change handlers are called synchronously, in registration order, before
`set_value` returns. A handler may itself call `set_value` or `bump`; that
inner call completes (including its own notifications) before the next
handler of the outer call runs. `link` propagation relies on this: linked
trackables are re-notified inside the same update so that every goal shown
on screen is consistent once the outermost call returns.

Classes:
    ChangeEvent: Data passed to change handlers.
    GoalStatus: Result of a goal query.
    TrackerModel: The value store.
"""
from __future__ import annotations

from dataclasses import dataclass
import logging
import math
import numbers
from typing import Any, Callable, Dict, List, Mapping, Optional, Set, Tuple

from palettetracker.model.exceptions import UnknownTrackable
from palettetracker.model.trackables import TrackableData

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChangeEvent:
    """A value being set in the model. Can represent a "no change" event."""
    track_key: str
    previous_value: float
    value: float

    @property
    def changed(self) -> bool:
        return self.previous_value != self.value


@dataclass(frozen=True)
class GoalStatus:
    fulfilled: bool
    target_value: Optional[float] = None


ChangeHandler = Callable[[ChangeEvent], None]


class TrackerModel:
    """
    Contains the current value of each trackable and handles value changes.
    """

    def __init__(self, trackables: Optional[Mapping[str, TrackableData]] = None) -> None:
        self._data: Dict[str, TrackableData] = {}
        self._links: Dict[str, Tuple[str, ...]] = {}
        self._values: Dict[str, float] = {}
        self._change_handlers: List[ChangeHandler] = []

        if trackables is not None:
            self.initialize(trackables)

    # ------------------------------------------------------------------------------
    # Definitions
    # ------------------------------------------------------------------------------

    @property
    def trackables(self) -> Mapping[str, TrackableData]:
        return self._data

    def initialize(self, trackables: Mapping[str, TrackableData]) -> None:
        """
        Set the trackable definitions for the tracker. Resets all values.

        Args:
            trackables: Definitions keyed by trackable id.

        Raises:
            UnknownTrackable: A `target_unless` entry names an undefined trackable.
        """
        links: Dict[str, List[str]] = {key: [] for key in trackables}
        for key, data in trackables.items():
            for other in data.target_unless:
                if other not in trackables:
                    raise UnknownTrackable(other, f"the definitions ('target_unless' of '{key}')")
                links[other].append(key)

        self._data = dict(trackables)
        self._links = {key: tuple(linked) for key, linked in links.items()}
        logger.info(f"Model initialized with {len(self._data)} trackables.")
        self.reset_values()

    def get_attribute(self, track_key: str, attribute: str, default: Any = None) -> Any:
        """Attribute of a trackable definition, or `default` when it is unset."""
        value = getattr(self._definition(track_key), attribute, None)
        return default if value is None else value

    def links(self, track_key: str) -> Tuple[str, ...]:
        """Trackables whose goal depends on `track_key` (inverse of `target_unless`)."""
        self._definition(track_key)
        return self._links[track_key]

    # ------------------------------------------------------------------------------
    # Observers
    # ------------------------------------------------------------------------------

    def register_change_handler(self, handler: ChangeHandler) -> ChangeHandler:
        """Register a callback fired for every value set. Returns the handler as the removal handle."""
        if not callable(handler):
            raise TypeError("Expected a callable as the handler")
        self._change_handlers.append(handler)
        return handler

    def unregister_change_handler(self, handler: ChangeHandler) -> None:
        """Remove a handler. Unknown handlers are ignored."""
        try:
            self._change_handlers.remove(handler)
        except ValueError:
            pass

    # ------------------------------------------------------------------------------
    # Values
    # ------------------------------------------------------------------------------

    def get_value(self, track_key: str) -> float:
        self._definition(track_key)
        return self._values[track_key]

    def snapshot(self) -> Dict[str, float]:
        """Copy of the current values, suitable for persisting."""
        return dict(self._values)

    def restore(self, values: Mapping[str, float]) -> None:
        """
        Apply a snapshot of values. Keys absent from the snapshot keep their value.

        Raises:
            UnknownTrackable: The snapshot contains a key that is not defined.
                No value is modified in that case.
            ValueError: A value is not a number. No value is modified either.
        """
        for key, value in values.items():
            if key not in self._data:
                raise UnknownTrackable(key, "the model (restored values)")
            _check_number(key, value)
        for key, value in values.items():
            self.set_value(key, value)

    def reset_values(self) -> None:
        """Reset all values to their minimum. Fires one notification per key."""
        self._values = {key: data.effective_min for key, data in self._data.items()}
        for key, value in self._values.items():
            # same value as stored: handlers refresh, links are not bumped
            self.set_value(key, value)

    def set_value(self, track_key: str, value: float) -> None:
        """
        Set a value in the tracker.

        The value is clamped into the trackable's bounds. Every change handler
        is notified, even when the value is unchanged. When it did change,
        each linked trackable gets a zero bump so its goal is re-evaluated.

        Raises:
            ValueError: The value is not a number, or is NaN.
        """
        data = self._definition(track_key)
        _check_number(track_key, value)
        clamped = data.clamp(value)
        if clamped != value:
            logger.debug(f"Value {value} for '{track_key}' clamped to {clamped}")

        previous = self._values[track_key]
        self._values[track_key] = clamped

        event = ChangeEvent(track_key=track_key, previous_value=previous, value=clamped)
        for handler in list(self._change_handlers):
            handler(event)

        if event.changed:
            logger.debug(f"'{track_key}': {previous} -> {clamped}")
            for linked in self._links[track_key]:
                self.bump(linked, 0)

    def bump(self, track_key: str, amount: float) -> None:
        """
        Add or subtract to a value in the model.

        Positive amounts are clamped to the maximum, other amounts to the minimum.
        """
        data = self._definition(track_key)
        new_value = self._values[track_key] + amount

        if amount > 0:
            upper = data.effective_max
            if upper is not None and new_value > upper:
                new_value = upper
        else:
            if new_value < data.effective_min:
                new_value = data.effective_min

        self.set_value(track_key, new_value)

    def increment_value(self, track_key: str, level: int, factor: float = 1) -> None:
        """
        Add or subtract to a value based on the trackable's 'increment' steps.

        Args:
            track_key: Reference to a trackable.
            level: Index into the increment steps, clamped to the valid range.
            factor: Multiplier (e.g. -1 to subtract instead of add).
        """
        increment = self._definition(track_key).increment
        level = min(max(level, 0), len(increment) - 1)
        self.bump(track_key, increment[level] * factor)

    # ------------------------------------------------------------------------------
    # Goals
    # ------------------------------------------------------------------------------

    def goal_status(self, track_key: str) -> GoalStatus:
        """
        Whether the goal of a trackable is met, either by its own value or
        because every trackable in its `target_unless` is met and non-zero.
        """
        self._definition(track_key)
        return self._goal_status(track_key, set())

    def _goal_status(self, track_key: str, evaluating: Set[str]) -> GoalStatus:
        data = self._data[track_key]
        value = self._values[track_key]

        evaluating.add(track_key)
        try:
            alternate = bool(data.target_unless) and all(
                self._unless_fulfilled(other, evaluating) for other in data.target_unless
            )
        finally:
            evaluating.discard(track_key)

        if data.target is None:
            return GoalStatus(fulfilled=alternate or value >= 1)
        return GoalStatus(fulfilled=alternate or value >= data.target, target_value=data.target)

    def _unless_fulfilled(self, other: str, evaluating: Set[str]) -> bool:
        # a trackable already on the evaluation path counts as not fulfilled (cycle guard)
        if other in evaluating:
            return False
        if self._values[other] == 0:
            return False
        return self._goal_status(other, evaluating).fulfilled

    # ------------------------------------------------------------------------------
    # Internal methods
    # ------------------------------------------------------------------------------

    def _definition(self, track_key: str) -> TrackableData:
        try:
            return self._data[track_key]
        except KeyError:
            raise UnknownTrackable(track_key) from None


def _check_number(track_key: str, value: Any) -> None:
    # NaN fails every bound comparison, so it would slip through clamping
    if not isinstance(value, numbers.Real) or math.isnan(value):
        raise ValueError(f"Value {value!r} for '{track_key}' is not a number")
