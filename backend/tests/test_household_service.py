"""Tests for households, membership and user preferences, and how the sweep fans out over them."""

from datetime import datetime, timezone

import pytest

from app.core.errors import (
    AlreadyInHouseholdError,
    EmailInUseError,
    EmptyUpdateError,
    InvalidInviteCodeError,
    InvalidMemberRemovalError,
    OwnerRequiredError,
)
from app.models.alert import Alert
from app.models.household import HouseholdMember
from app.models.notification_log import NotificationLog
from app.services import household_service, item_service, user_service
from app.services.alert_service import run_alert_sweep

ADDED = datetime(2020, 1, 1, tzinfo=timezone.utc)


@pytest.fixture
def owner(db):
    return user_service.create_user(db, "Owner@StillGood.local ", "Olive")


@pytest.fixture
def joiner(db):
    return user_service.create_user(db, "joiner@stillgood.local", "Jo")


@pytest.fixture
def home(db, owner):
    return household_service.create_household(db, owner.id, "  Flat 4 ")


class TestUsers:

    def test_create_user_normalizes_email(self, owner):
        assert owner.email == "owner@stillgood.local"
        assert (owner.prefs_email, owner.prefs_in_app) == (True, True)

    def test_duplicate_email_is_rejected(self, db, owner):
        with pytest.raises(EmailInUseError):
            user_service.create_user(db, "OWNER@stillgood.local", "Other")

    def test_update_preferences_changes_only_given_channels(self, db, owner):
        user = user_service.update_preferences(db, owner, {"prefs_email": False})
        assert (user.prefs_email, user.prefs_in_app) == (False, True)

    def test_empty_preferences_update_is_rejected(self, db, owner):
        with pytest.raises(EmptyUpdateError):
            user_service.update_preferences(db, owner, {})
        with pytest.raises(EmptyUpdateError):
            user_service.update_preferences(db, owner, {"prefs_email": None, "name": "x"})


class TestHouseholds:

    def test_create_makes_caller_owner(self, db, owner, home):
        assert home.name == "Flat 4"
        assert len(home.invite_code) == 6
        assert home.invite_code.isalnum() and home.invite_code == home.invite_code.upper()
        info = household_service.household_for_user(db, owner.id)
        assert info == {"id": home.id, "name": "Flat 4", "invite_code": home.invite_code, "role": "OWNER"}

    def test_user_without_household(self, db, joiner):
        assert household_service.household_for_user(db, joiner.id) is None

    def test_second_household_is_rejected(self, db, owner, home):
        with pytest.raises(AlreadyInHouseholdError):
            household_service.create_household(db, owner.id, "Cabin")

    def test_join_by_invite_code_is_case_insensitive(self, db, joiner, home):
        joined = household_service.join_household(db, joiner.id, f" {home.invite_code.lower()} ")
        assert joined.id == home.id
        assert household_service.household_for_user(db, joiner.id)["role"] == "MEMBER"
        with pytest.raises(AlreadyInHouseholdError):
            household_service.join_household(db, joiner.id, home.invite_code)

    def test_unknown_invite_code(self, db, joiner, home):
        with pytest.raises(InvalidInviteCodeError):
            household_service.join_household(db, joiner.id, "NOPE42")

    def test_regenerate_invite_is_owner_only(self, db, joiner, home):
        old_code = home.invite_code
        household_service.join_household(db, joiner.id, old_code)
        with pytest.raises(OwnerRequiredError):
            household_service.regenerate_invite(db, home.id, "MEMBER")
        new_code = household_service.regenerate_invite(db, home.id, "OWNER")
        assert new_code != old_code
        late = user_service.create_user(db, "late@stillgood.local", "Late")
        with pytest.raises(InvalidInviteCodeError):
            household_service.join_household(db, late.id, old_code)

    def test_list_members_in_join_order(self, db, owner, joiner, home):
        household_service.join_household(db, joiner.id, home.invite_code)
        members = household_service.list_members(db, home.id)
        assert [(m["id"], m["role"]) for m in members] == [(owner.id, "OWNER"), (joiner.id, "MEMBER")]

    def test_remove_member(self, db, owner, joiner, home):
        household_service.join_household(db, joiner.id, home.invite_code)
        with pytest.raises(OwnerRequiredError):
            household_service.remove_member(db, home.id, "MEMBER", joiner.id, owner.id)
        with pytest.raises(InvalidMemberRemovalError):
            household_service.remove_member(db, home.id, "OWNER", owner.id, owner.id)
        household_service.remove_member(db, home.id, "OWNER", owner.id, joiner.id)
        assert db.query(HouseholdMember).filter(HouseholdMember.user_id == joiner.id).count() == 0
        # removing again is a no-op
        household_service.remove_member(db, home.id, "OWNER", owner.id, joiner.id)


class TestSweepFollowsMembership:

    def test_joined_member_gets_alerts_with_their_preferences(self, db, owner, joiner, home):
        household_service.join_household(db, joiner.id, home.invite_code)
        user_service.update_preferences(db, joiner, {"prefs_email": False})
        item_service.create_item(db, home.id, owner.id, "Milk", "dairy", "1 L", date_added=ADDED, now=ADDED)

        stats = run_alert_sweep(db)
        assert stats.alerts_created == 2
        joiner_email = (
            db.query(NotificationLog)
            .filter(NotificationLog.user_id == joiner.id, NotificationLog.channel == "EMAIL")
            .one()
        )
        assert joiner_email.status == "SKIPPED"

    def test_removed_member_gets_no_new_alerts(self, db, owner, joiner, home):
        household_service.join_household(db, joiner.id, home.invite_code)
        household_service.remove_member(db, home.id, "OWNER", owner.id, joiner.id)
        item_service.create_item(db, home.id, owner.id, "Milk", "dairy", "1 L", date_added=ADDED, now=ADDED)

        run_alert_sweep(db)
        assert {a.user_id for a in db.query(Alert).all()} == {owner.id}
