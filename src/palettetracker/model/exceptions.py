"""Errors raised by the model layer."""


class UnknownTrackable(LookupError):
    """An operation referenced a trackable id missing from the current definitions."""

    def __init__(self, track_key: str, context: str = "the model") -> None:
        super().__init__(f"Trackable '{track_key}' is not defined in {context}")
        self.track_key = track_key


class UnknownProfile(LookupError):
    """A profile key is not present in the profile catalog."""


class MalformedCluster(ValueError):
    """Boundary segments could not be stitched into a single outline."""
