"""Tests for the profile catalog."""

import pytest

from palettetracker.config import DEFAULT_PROFILE
from palettetracker.model.exceptions import UnknownProfile, UnknownTrackable
from palettetracker.model.profiles import ALL_PROFILES, LayoutEntry, build_profile, get_profile
from palettetracker.model.hex_geometry import HexCoord
from palettetracker.model.state import TrackerModel


class TestCatalog:
    """Test the predefined profiles."""

    def test_default_profile_exists(self):
        assert get_profile(DEFAULT_PROFILE).key == DEFAULT_PROFILE

    def test_unknown_profile(self):
        with pytest.raises(UnknownProfile):
            get_profile("does-not-exist")

    @pytest.mark.parametrize("key", sorted(ALL_PROFILES))
    def test_profiles_load_into_model(self, key):
        """Every profile initializes a model and lays out only its own trackables."""
        profile = get_profile(key)
        model = TrackerModel(profile.trackables)
        assert profile.layouts
        for layout in profile.layouts:
            assert set(layout) <= set(model.trackables)
            codes = [entry.code for entry in layout.values()]
            assert len(codes) == len(set(codes))

    def test_profile_extends_base(self):
        profile = get_profile("ep1-glitchless-any%-fonewm")
        hp = profile.trackables["hp"]
        assert hp.target == 21
        assert hp.increment == (1, 2, 10)
        assert profile.trackables["slots"].target_unless == ("hp",)

    def test_get_layout_out_of_range(self):
        profile = get_profile(DEFAULT_PROFILE)
        with pytest.raises(IndexError):
            profile.get_layout(len(profile.layouts))
        with pytest.raises(IndexError):
            profile.get_layout(-1)

    def test_layout_entry_coord(self):
        assert LayoutEntry(2, 3, "KeyQ").coord == HexCoord(2, 3)


class TestBuildProfile:
    """Test profile validation."""

    def test_unknown_trackable(self):
        with pytest.raises(UnknownTrackable):
            build_profile("p", "P", {"nope": {}}, [])

    def test_unknown_target_unless(self):
        with pytest.raises(UnknownTrackable):
            build_profile("p", "P", {"gifoie": {"target_unless": ["rafoie"]}}, [])

    def test_layout_references_unknown(self):
        with pytest.raises(UnknownTrackable):
            build_profile("p", "P", {"foie": {}}, [{"barta": (0, 0, "KeyQ")}])

    def test_duplicate_cell(self):
        with pytest.raises(ValueError):
            build_profile("p", "P", {"foie": {}, "barta": {}},
                          [{"foie": (0, 0, "KeyQ"), "barta": (0, 0, "KeyW")}])

    def test_duplicate_code(self):
        with pytest.raises(ValueError):
            build_profile("p", "P", {"foie": {}, "barta": {}},
                          [{"foie": (0, 0, "KeyQ"), "barta": (0, 1, "KeyQ")}])
