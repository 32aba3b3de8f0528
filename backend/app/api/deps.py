"""
Request dependencies: resolve the calling user and their household.

The caller is identified by the X-User-Id header (a real auth layer sits in front of this
service). The household is the caller's first membership.
"""
from dataclasses import dataclass

from fastapi import Depends, Header
from sqlalchemy.orm import Session

from app.core.errors import NoHouseholdError, UnauthorizedError, app_error_to_http
from app.db.session import get_db
from app.models.user import User
from app.services.household_service import get_membership


@dataclass
class CurrentMember:
    user: User
    household_id: int
    role: str

    @property
    def user_id(self) -> int:
        return self.user.id


def get_current_user(
    x_user_id: str | None = Header(None, alias="X-User-Id"),
    db: Session = Depends(get_db),
) -> User:
    raw = (x_user_id or "").strip()
    if not raw.isdigit():
        raise app_error_to_http(UnauthorizedError())
    user = db.get(User, int(raw))
    if user is None:
        raise app_error_to_http(UnauthorizedError())
    return user


def get_current_member(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> CurrentMember:
    membership = get_membership(db, user.id)
    if membership is None:
        raise app_error_to_http(NoHouseholdError())
    return CurrentMember(user=user, household_id=membership.household_id, role=membership.role)
