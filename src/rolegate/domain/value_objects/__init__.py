"""Domain value objects."""

from rolegate.domain.value_objects.actor import Actor
from rolegate.domain.value_objects.filter_state import FilterState
from rolegate.domain.value_objects.handle import is_valid_handle

__all__ = [
    "Actor",
    "FilterState",
    "is_valid_handle",
]
