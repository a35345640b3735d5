"""Shared fixtures."""

import os

import pytest

# Qt widgets need a platform plugin; tests never open a real window
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from palettetracker.model.state import TrackerModel
from palettetracker.model.trackables import TrackableData


@pytest.fixture
def model():
    """Small model covering bounds, toggles, targets and target_unless."""
    return TrackerModel({
        "counter": TrackableData(max=10, increment=(1, 2, 5)),
        "boost": TrackableData(max=650, increment=(1, 2, 10)),
        "toggle": TrackableData(toggle=True),
        "target3": TrackableData(max=5, target=3),
        "a": TrackableData(target=1, target_unless=("b",)),
        "b": TrackableData(max=5),
        "unbounded": TrackableData(),
    })


@pytest.fixture
def events(model):
    """Every change event fired by `model`, in order."""
    received = []
    model.register_change_handler(received.append)
    return received


@pytest.fixture(scope="session")
def qapp():
    from palettetracker.app.application import create_app
    return create_app([])
