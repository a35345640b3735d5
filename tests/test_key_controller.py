"""Tests for keyboard input."""

import pytest

from palettetracker.controller.key_controller import KeyController
from palettetracker.model.profiles import LayoutEntry


@pytest.fixture
def controller(model):
    controller = KeyController(model)
    controller.initialize({
        "counter": LayoutEntry(0, 0, "KeyQ"),
        "boost": LayoutEntry(1, 0, "Digit1"),
        "toggle": LayoutEntry(2, 0, "KeyT"),
    })
    return controller


class TestKeyDown:
    """Test key presses with modifiers."""

    def test_requires_model(self):
        with pytest.raises(TypeError):
            KeyController(object())

    def test_plain_key_adds_first_step(self, model, controller):
        assert controller.on_key_down("KeyQ")
        assert model.get_value("counter") == 1

    def test_alt_uses_level_one(self, model, controller):
        controller.on_key_down("KeyQ", alt=True)
        assert model.get_value("counter") == 2

    def test_ctrl_uses_level_two(self, model, controller):
        controller.on_key_down("Digit1", ctrl=True)
        assert model.get_value("boost") == 10

    def test_level_clamped_to_steps(self, model, controller):
        """Alt+Ctrl is level 3, the counter only has three steps."""
        controller.on_key_down("KeyQ", alt=True, ctrl=True)
        assert controller.input_level == 3
        assert controller.get_input_level("counter") == 2
        assert model.get_value("counter") == 5

    def test_shift_subtracts(self, model, controller):
        model.set_value("counter", 4)
        controller.on_key_down("KeyQ", shift=True)
        assert controller.input_factor == -1
        assert model.get_value("counter") == 3

    def test_unbound_key_ignored(self, model, controller):
        assert not controller.on_key_down("KeyZ")
        assert model.snapshot()["counter"] == 0

    def test_modifier_key_handled(self, controller):
        assert controller.on_key_down("AltLeft", alt=True)
        assert controller.input_level == 1

    def test_override_wins(self, model, controller):
        controller.override_input_level("boost", 1)
        controller.on_key_down("Digit1", ctrl=True)
        assert model.get_value("boost") == 2
        controller.override_input_level("boost", None)
        assert controller.get_input_level("boost") == 2


class TestKeyUp:
    """Test modifier release."""

    def test_release_resets_level(self, controller):
        controller.on_key_down("ControlLeft", ctrl=True)
        assert controller.on_key_up("ControlLeft")
        assert controller.input_level == 0

    def test_release_shift_resets_factor(self, controller):
        controller.on_key_down("ShiftLeft", shift=True)
        controller.on_key_up("ShiftRight")
        assert controller.input_factor == 1

    def test_other_key_release_ignored(self, controller):
        assert not controller.on_key_up("KeyQ")


class TestInputHandlers:
    """Test input notifications."""

    def test_handlers_receive_track_key(self, controller):
        received = []
        controller.register_input_handler(received.append)
        controller.on_key_down("KeyQ")
        controller.on_key_up("AltLeft")
        assert [e.track_key for e in received] == ["counter", None]

    def test_unregister(self, controller):
        received = []
        handler = controller.register_input_handler(received.append)
        controller.unregister_input_handler(handler)
        controller.unregister_input_handler(handler)
        controller.on_key_down("KeyQ")
        assert received == []


class TestDisplayText:
    """Test key binding texts."""

    def test_key_code(self, controller):
        assert controller.get_key_code("counter") == "KeyQ"
        assert controller.get_key_code("b") is None

    @pytest.mark.parametrize("key, level, expected", [
        ("counter", 0, "Q"),
        ("boost", 0, "1"),
        ("counter", 1, "Alt+Q"),
        ("counter", 2, "Ctrl+Q"),
        ("boost", 3, "Alt+Ctrl+1"),
        ("counter", 4, ""),
        ("b", 0, ""),
    ])
    def test_display_text(self, controller, key, level, expected):
        assert controller.get_key_code_display_text(key, level) == expected

    def test_all_increments(self, controller):
        assert controller.get_all_increments_display_text("counter") == (
            "+1:[Q], +2:[Alt+Q], +5:[Ctrl+Q] (Shift to subtract)"
        )

    def test_toggle_increments(self, controller):
        assert controller.get_all_increments_display_text("toggle") == "On:[T] Off:[Shift+T]"
