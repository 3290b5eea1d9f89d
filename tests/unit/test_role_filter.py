"""Unit tests for RoleFilter and FilterState."""

from datetime import UTC, datetime

import pytest

from rolegate.domain.entities import Role, RoleFilter
from rolegate.domain.value_objects import FilterState

NOW = datetime.now(UTC)


class TestFilterState:
    """Tests for FilterState.admits and FilterState.parse."""

    @pytest.mark.parametrize(
        ("state", "in_state", "expected"),
        [
            (FilterState.EXCLUDED, False, True),
            (FilterState.EXCLUDED, True, False),
            (FilterState.INCLUSIVE, False, True),
            (FilterState.INCLUSIVE, True, True),
            (FilterState.EXCLUSIVE, False, False),
            (FilterState.EXCLUSIVE, True, True),
        ],
    )
    def test_admits(self, state, in_state, expected) -> None:
        assert state.admits(in_state) is expected

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            (None, FilterState.EXCLUDED),
            ("", FilterState.EXCLUDED),
            ("0", FilterState.EXCLUDED),
            ("1", FilterState.INCLUSIVE),
            ("2", FilterState.EXCLUSIVE),
            (2, FilterState.EXCLUSIVE),
            ("inclusive", FilterState.INCLUSIVE),
            ("Exclusive", FilterState.EXCLUSIVE),
        ],
    )
    def test_parse(self, raw, expected) -> None:
        assert FilterState.parse(raw) is expected

    def test_parse_unknown_number(self) -> None:
        with pytest.raises(ValueError):
            FilterState.parse("3")

    def test_parse_unknown_name(self) -> None:
        with pytest.raises(KeyError):
            FilterState.parse("sometimes")


class TestRoleFilterMatches:
    """Tests for RoleFilter.matches."""

    def test_default_excludes_soft_states(self) -> None:
        f = RoleFilter()
        assert f.matches(Role(id=1, name="A", handle="aa"))
        assert not f.matches(Role(id=2, name="B", handle="bb", deleted_at=NOW))
        assert not f.matches(Role(id=3, name="C", handle="cc", archived_at=NOW))

    def test_exclusive_archived(self) -> None:
        f = RoleFilter(archived=FilterState.EXCLUSIVE)
        assert f.matches(Role(id=1, name="A", handle="aa", archived_at=NOW))
        assert not f.matches(Role(id=2, name="B", handle="bb"))

    def test_name_and_handle_exact(self) -> None:
        f = RoleFilter(name="Editors", handle="editors")
        assert f.matches(Role(id=1, name="Editors", handle="editors"))
        assert not f.matches(Role(id=2, name="Editors", handle="editors2"))
        assert not f.matches(Role(id=3, name="editors", handle="editors"))

    def test_query_case_insensitive_substring(self) -> None:
        f = RoleFilter(query="EDIT")
        assert f.matches(Role(id=1, name="Editors", handle="team"))
        assert f.matches(Role(id=2, name="Team", handle="sub-editors"))
        assert not f.matches(Role(id=3, name="Writers", handle="writers"))

    def test_is_readable_applied(self) -> None:
        f = RoleFilter(is_readable=lambda r: r.id == 1)
        assert f.matches(Role(id=1, name="A", handle="aa"))
        assert not f.matches(Role(id=2, name="B", handle="bb"))

    def test_includes_restricted(self) -> None:
        assert not RoleFilter().includes_restricted
        assert RoleFilter(deleted=FilterState.INCLUSIVE).includes_restricted
        assert RoleFilter(archived=FilterState.EXCLUSIVE).includes_restricted
