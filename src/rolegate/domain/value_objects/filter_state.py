"""Visibility of soft-state roles in searches."""

from enum import IntEnum


class FilterState(IntEnum):
    """How roles in a given state (deleted, archived) are treated by a search."""

    EXCLUDED = 0
    INCLUSIVE = 1
    EXCLUSIVE = 2

    def admits(self, in_state: bool) -> bool:
        """Return True if a role that is (or is not) in the state passes."""
        if self is FilterState.EXCLUDED:
            return not in_state
        if self is FilterState.EXCLUSIVE:
            return in_state
        return True

    @classmethod
    def parse(cls, value: str | int | None) -> "FilterState":
        """Parse from a query parameter: 0/1/2 or excluded/inclusive/exclusive."""
        if value is None or value == "":
            return cls.EXCLUDED
        if isinstance(value, int) or value.isdigit():
            return cls(int(value))
        return cls[value.upper()]
