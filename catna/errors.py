"""Exceptions and warnings raised by catna.

Unmatched values degrade to ``NoMatch`` silently unless the caller asks
otherwise, so most of these only appear when ``on_unmatched`` is set.
"""


class LevelSetError(ValueError):
    """A level set violates its invariants or can't be represented."""
    pass


class UnmatchedLevelError(ValueError):
    """A non-null value did not match any declared level."""

    def __init__(self, value, position: int):
        self.value = value
        self.position = position
        super().__init__(
            f"value {value!r} at position {position} does not match any declared level"
        )


class UnmatchedLevelWarning(UserWarning):
    pass
