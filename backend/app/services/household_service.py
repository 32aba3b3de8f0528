"""
Households: create (caller becomes OWNER), join by invite code, members, invite regeneration.

A user belongs to at most one household; their household is their first membership.
The alert sweep fans out to every member of the item's household.
"""
import logging
import secrets
import string
from typing import Any

from sqlalchemy.orm import Session

from app.core.constants import INVITE_CODE_LENGTH
from app.core.enums import MemberRole
from app.core.errors import (
    AlreadyInHouseholdError,
    InvalidInviteCodeError,
    InvalidMemberRemovalError,
    NoHouseholdError,
    OwnerRequiredError,
)
from app.models.household import Household, HouseholdMember
from app.models.user import User

logger = logging.getLogger(__name__)

_INVITE_ALPHABET = string.ascii_uppercase + string.digits


def normalize_invite_code(code: str | None) -> str:
    return (code or "").strip().upper()


def generate_invite_code(db: Session) -> str:
    """Random upper-case code not used by any household."""
    while True:
        code = "".join(secrets.choice(_INVITE_ALPHABET) for _ in range(INVITE_CODE_LENGTH))
        if db.query(Household.id).filter(Household.invite_code == code).first() is None:
            return code


def get_membership(db: Session, user_id: int) -> HouseholdMember | None:
    return (
        db.query(HouseholdMember)
        .filter(HouseholdMember.user_id == user_id)
        .order_by(HouseholdMember.id.asc())
        .first()
    )


def _ensure_no_membership(db: Session, user_id: int) -> None:
    if get_membership(db, user_id) is not None:
        raise AlreadyInHouseholdError()


def create_household(db: Session, user_id: int, name: str) -> Household:
    _ensure_no_membership(db, user_id)
    household = Household(name=name.strip(), invite_code=generate_invite_code(db))
    db.add(household)
    db.flush()
    db.add(HouseholdMember(household_id=household.id, user_id=user_id, role=MemberRole.OWNER.value))
    db.commit()
    db.refresh(household)
    logger.info("Household %s created by user %s", household.id, user_id)
    return household


def join_household(db: Session, user_id: int, invite_code: str) -> Household:
    _ensure_no_membership(db, user_id)
    household = (
        db.query(Household)
        .filter(Household.invite_code == normalize_invite_code(invite_code))
        .first()
    )
    if not household:
        raise InvalidInviteCodeError()
    db.add(HouseholdMember(household_id=household.id, user_id=user_id, role=MemberRole.MEMBER.value))
    db.commit()
    db.refresh(household)
    logger.info("User %s joined household %s", user_id, household.id)
    return household


def household_for_user(db: Session, user_id: int) -> dict[str, Any] | None:
    """The user's household with their role, or None when they have not joined one."""
    membership = get_membership(db, user_id)
    if membership is None:
        return None
    household = db.get(Household, membership.household_id)
    return {**household_to_dict(household), "role": membership.role}


def _require_owner(role: str) -> None:
    if role != MemberRole.OWNER.value:
        raise OwnerRequiredError()


def regenerate_invite(db: Session, household_id: int, role: str) -> str:
    """Owner only. The old code stops working immediately."""
    _require_owner(role)
    household = db.get(Household, household_id)
    if household is None:
        raise NoHouseholdError()
    household.invite_code = generate_invite_code(db)
    db.commit()
    return household.invite_code


def list_members(db: Session, household_id: int) -> list[dict[str, Any]]:
    rows = (
        db.query(HouseholdMember, User)
        .join(User, User.id == HouseholdMember.user_id)
        .filter(HouseholdMember.household_id == household_id)
        .order_by(HouseholdMember.id.asc())
        .all()
    )
    return [
        {"id": user.id, "name": user.name, "email": user.email, "role": member.role}
        for member, user in rows
    ]


def remove_member(db: Session, household_id: int, role: str, actor_user_id: int, user_id: int) -> None:
    """Owner only; the owner cannot remove themselves. Removing a non-member is a no-op."""
    _require_owner(role)
    if user_id == actor_user_id:
        raise InvalidMemberRemovalError()
    removed = (
        db.query(HouseholdMember)
        .filter(HouseholdMember.household_id == household_id, HouseholdMember.user_id == user_id)
        .delete(synchronize_session=False)
    )
    db.commit()
    if removed:
        logger.info("User %s removed from household %s", user_id, household_id)


def household_to_dict(household: Household) -> dict[str, Any]:
    return {"id": household.id, "name": household.name, "invite_code": household.invite_code}
