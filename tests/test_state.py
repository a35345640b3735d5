"""Tests for the tracker value model."""

import math
import random

import pytest

from palettetracker.model.exceptions import UnknownTrackable
from palettetracker.model.state import ChangeEvent, GoalStatus, TrackerModel
from palettetracker.model.trackables import TrackableData


class TestInitialize:
    """Test definition loading."""

    def test_values_start_at_min(self):
        model = TrackerModel({"x": TrackableData(min=2, max=5), "t": TrackableData(toggle=True)})
        assert model.get_value("x") == 2
        assert model.get_value("t") == 0

    def test_links_are_inverse_of_target_unless(self, model):
        assert model.links("b") == ("a",)
        assert model.links("a") == ()
        assert model.links("counter") == ()

    def test_unknown_target_unless_rejected(self):
        model = TrackerModel()
        with pytest.raises(UnknownTrackable) as info:
            model.initialize({"a": TrackableData(target_unless=("missing",))})
        assert info.value.track_key == "missing"

    def test_reinitialize_replaces_definitions(self, model):
        model.initialize({"only": TrackableData()})
        assert list(model.trackables) == ["only"]
        with pytest.raises(UnknownTrackable):
            model.get_value("counter")

    def test_get_attribute_default(self, model):
        assert model.get_attribute("counter", "max") == 10
        assert model.get_attribute("counter", "target", "none") == "none"
        assert model.get_attribute("counter", "increment") == (1, 2, 5)


class TestBounds:
    """Test clamping of values."""

    def test_bump_positive_infinity_clamps_to_max(self, model):
        model.bump("counter", math.inf)
        assert model.get_value("counter") == 10

    def test_bump_negative_infinity_clamps_to_min(self, model):
        model.set_value("counter", 4)
        model.bump("counter", -math.inf)
        assert model.get_value("counter") == 0

    def test_toggle_max_is_one(self, model):
        model.bump("toggle", math.inf)
        assert model.get_value("toggle") == 1

    def test_clamped_bump_is_idempotent(self, model, events):
        """Repeating a clamped bump does not change the value."""
        model.bump("counter", math.inf)
        events.clear()
        model.bump("counter", math.inf)
        assert model.get_value("counter") == 10
        assert len(events) == 1
        assert not events[0].changed

    def test_unbounded_has_no_max(self, model):
        model.bump("unbounded", 1000)
        assert model.get_value("unbounded") == 1000

    def test_nan_rejected(self, model):
        model.set_value("counter", 3)
        with pytest.raises(ValueError):
            model.bump("counter", math.nan)
        with pytest.raises(ValueError):
            model.set_value("counter", math.nan)
        assert model.get_value("counter") == 3

    def test_non_number_rejected(self, model):
        with pytest.raises(ValueError):
            model.set_value("counter", "lots")

    def test_set_value_clamps(self, model):
        model.set_value("counter", 99)
        assert model.get_value("counter") == 10
        model.set_value("counter", -3)
        assert model.get_value("counter") == 0

    def test_values_stay_in_bounds(self, model):
        """Random bumps and increments never leave [min, max]."""
        rng = random.Random(1234)
        keys = ["counter", "boost", "toggle", "target3", "b"]
        for _ in range(500):
            key = rng.choice(keys)
            if rng.random() < 0.5:
                model.bump(key, rng.uniform(-20, 20))
            else:
                model.increment_value(key, rng.randint(-1, 5), rng.choice([1, -1]))
            data = model.trackables[key]
            value = model.get_value(key)
            assert data.effective_min <= value
            assert value <= data.effective_max


class TestIncrementValue:
    """Test level based increments."""

    def test_level_selects_step(self, model):
        model.increment_value("counter", 1)
        assert model.get_value("counter") == 2
        model.increment_value("counter", 2)
        assert model.get_value("counter") == 7

    def test_level_clamped_and_subtracted(self, model):
        """Level 5 on [1, 2, 10] uses 10; factor -1 subtracts it, clamped to min."""
        model.set_value("boost", 10)
        model.increment_value("boost", 5, -1)
        assert model.get_value("boost") == 0

    def test_negative_level_uses_first_step(self, model):
        model.increment_value("boost", -2)
        assert model.get_value("boost") == 1


class TestGoals:
    """Test goal evaluation."""

    def test_target_sequence(self, model):
        """Target 3: values 0, 1, 2, 3 are unmet, unmet, unmet, met."""
        results = []
        for value in range(4):
            model.set_value("target3", value)
            results.append(model.goal_status("target3").fulfilled)
        assert results == [False, False, False, True]
        assert model.goal_status("target3").target_value == 3

    def test_no_target_means_at_least_one(self, model):
        assert model.goal_status("counter") == GoalStatus(fulfilled=False)
        model.set_value("counter", 1)
        assert model.goal_status("counter") == GoalStatus(fulfilled=True)

    def test_target_unless_fulfills_without_own_change(self, model, events):
        """Setting B re-notifies A, whose goal is then met."""
        statuses = []
        model.register_change_handler(
            lambda e: statuses.append(model.goal_status("a").fulfilled) if e.track_key == "a" else None
        )
        assert not model.goal_status("a").fulfilled

        model.set_value("b", 1)

        assert model.get_value("a") == 0
        assert model.goal_status("a").fulfilled
        assert [e.track_key for e in events] == ["b", "a"]
        assert events[1] == ChangeEvent("a", 0, 0)
        assert statuses == [True]

    def test_unchanged_value_does_not_notify_links(self, model, events):
        model.set_value("b", 0)
        assert [e.track_key for e in events] == ["b"]

    def test_cycle_counts_as_unmet(self):
        model = TrackerModel({
            "x": TrackableData(target=2, target_unless=("y",)),
            "y": TrackableData(target=2, target_unless=("x",)),
            "self": TrackableData(target=2, target_unless=("self",)),
        })
        model.set_value("x", 1)
        model.set_value("y", 1)
        model.set_value("self", 1)
        assert not model.goal_status("x").fulfilled
        assert not model.goal_status("y").fulfilled
        assert not model.goal_status("self").fulfilled

    def test_cycle_member_met_by_own_value(self):
        model = TrackerModel({
            "x": TrackableData(target=2, target_unless=("y",)),
            "y": TrackableData(target=1, target_unless=("x",)),
        })
        model.set_value("y", 1)
        assert model.goal_status("x").fulfilled

    def test_zero_unless_member_does_not_count(self):
        """A trackable met through its own target_unless still needs a value."""
        model = TrackerModel({
            "a": TrackableData(target=1, target_unless=("b",)),
            "b": TrackableData(target=1, target_unless=("c",)),
            "c": TrackableData(),
        })
        model.set_value("c", 1)
        assert model.goal_status("b").fulfilled
        assert not model.goal_status("a").fulfilled


class TestObservers:
    """Test change notifications."""

    def test_unchanged_set_still_notifies(self, model, events):
        model.set_value("counter", 0)
        assert events == [ChangeEvent("counter", 0, 0)]

    def test_registration_order(self, model):
        calls = []
        model.register_change_handler(lambda e: calls.append("first"))
        model.register_change_handler(lambda e: calls.append("second"))
        model.bump("counter", 1)
        assert calls == ["first", "second"]

    def test_reentrant_set_completes_before_next_handler(self, model):
        order = []

        def chain(event):
            if event.track_key == "counter" and event.value == 1:
                model.set_value("b", 2)

        model.register_change_handler(chain)
        model.register_change_handler(lambda e: order.append(e.track_key))
        model.set_value("counter", 1)
        assert order == ["b", "a", "counter"]

    def test_unregister(self, model, events):
        model.unregister_change_handler(events.append)
        model.bump("counter", 1)
        assert events == []

    def test_unregister_unknown_is_noop(self, model):
        model.unregister_change_handler(lambda e: None)

    def test_register_requires_callable(self, model):
        with pytest.raises(TypeError):
            model.register_change_handler("not callable")


class TestUnknownTrackable:
    """Every operation rejects undefined ids."""

    @pytest.mark.parametrize("operation", [
        lambda m: m.get_value("nope"),
        lambda m: m.set_value("nope", 1),
        lambda m: m.bump("nope", 1),
        lambda m: m.increment_value("nope", 0),
        lambda m: m.goal_status("nope"),
        lambda m: m.links("nope"),
        lambda m: m.get_attribute("nope", "max"),
    ])
    def test_raises(self, model, operation):
        with pytest.raises(UnknownTrackable):
            operation(model)

    def test_is_lookup_error(self, model):
        with pytest.raises(LookupError):
            model.get_value("nope")


class TestSnapshot:
    """Test snapshot, restore and reset."""

    def test_restore_snapshot(self, model):
        model.set_value("counter", 3)
        model.set_value("toggle", 1)
        saved = model.snapshot()

        other = TrackerModel(model.trackables)
        other.restore(saved)
        assert other.snapshot() == saved

    def test_restore_unknown_leaves_values(self, model):
        model.set_value("counter", 3)
        with pytest.raises(UnknownTrackable):
            model.restore({"counter": 5, "nope": 1})
        assert model.get_value("counter") == 3

    def test_restore_non_number_leaves_values(self, model):
        model.set_value("counter", 3)
        with pytest.raises(ValueError):
            model.restore({"counter": 5, "boost": "lots"})
        assert model.get_value("counter") == 3

    def test_restore_keeps_missing_keys(self, model):
        model.set_value("boost", 20)
        model.restore({"counter": 4})
        assert model.get_value("boost") == 20
        assert model.get_value("counter") == 4

    def test_reset_values(self, model, events):
        model.set_value("counter", 3)
        events.clear()
        model.reset_values()
        assert model.get_value("counter") == 0
        assert sorted(e.track_key for e in events) == sorted(model.trackables)
