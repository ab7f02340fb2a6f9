"""Tests for actor base scoping."""

import pytest

from armory.application.use_cases.scope import can_see, resolve_base
from armory.core.entities import Actor, Role
from armory.core.exceptions import PermissionDeniedError, ValidationError


class TestResolveBase:
    def test_pinned_to_own_base(self, commander):
        assert resolve_base(commander, None) == 1
        assert resolve_base(commander, 1) == 1

    def test_other_base_denied(self, commander):
        with pytest.raises(PermissionDeniedError):
            resolve_base(commander, 2)

    def test_no_base_assigned(self):
        with pytest.raises(PermissionDeniedError):
            resolve_base(Actor(name="x", role=Role.BASE_COMMANDER), None)

    def test_admin_any_base(self, admin):
        assert resolve_base(admin, 5) == 5
        assert resolve_base(admin, None, required=False) is None

    def test_admin_must_name_base_for_writes(self, admin):
        with pytest.raises(ValidationError):
            resolve_base(admin, None)


class TestCanSee:
    def test_either_side_of_transfer(self, commander, make_transfer):
        assert can_see(commander, make_transfer(from_base_id=2, to_base_id=1))
        assert not can_see(commander, make_transfer(from_base_id=2, to_base_id=3))

    def test_own_base_only(self, commander, make_purchase):
        assert can_see(commander, make_purchase())
        assert not can_see(commander, make_purchase(base_id=2))

    def test_admin_sees_all(self, admin, make_purchase):
        assert can_see(admin, make_purchase(base_id=9))
