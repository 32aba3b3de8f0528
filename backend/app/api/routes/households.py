"""
Households API: create, join by invite code, current household, invite regeneration, members.
"""
from typing import Any

from fastapi import APIRouter, Depends, Response
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from app.api.deps import CurrentMember, get_current_member, get_current_user
from app.core.constants import (
    HOUSEHOLD_NAME_MAX_LENGTH,
    HOUSEHOLD_NAME_MIN_LENGTH,
    INVITE_CODE_MAX_LENGTH,
    INVITE_CODE_MIN_LENGTH,
)
from app.core.errors import AppError, app_error_to_http
from app.db.session import get_db
from app.models.user import User
from app.services import household_service

router = APIRouter()


class CreateHouseholdBody(BaseModel):
    name: str = Field(..., min_length=HOUSEHOLD_NAME_MIN_LENGTH, max_length=HOUSEHOLD_NAME_MAX_LENGTH)


class JoinHouseholdBody(BaseModel):
    invite_code: str = Field(..., min_length=INVITE_CODE_MIN_LENGTH, max_length=INVITE_CODE_MAX_LENGTH)


@router.post("/households", status_code=201)
def create_household(
    body: CreateHouseholdBody,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
) -> dict[str, Any]:
    try:
        household = household_service.create_household(db, user.id, body.name)
    except AppError as e:
        raise app_error_to_http(e) from e
    return {"household": household_service.household_to_dict(household)}


@router.post("/households/join", status_code=201)
def join_household(
    body: JoinHouseholdBody,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
) -> dict[str, Any]:
    try:
        household = household_service.join_household(db, user.id, body.invite_code)
    except AppError as e:
        raise app_error_to_http(e) from e
    return {"household": household_service.household_to_dict(household)}


@router.get("/households/me")
def my_household(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
) -> dict[str, Any]:
    """The caller's household with their role; household is null before create/join."""
    return {"household": household_service.household_for_user(db, user.id)}


@router.post("/households/invite")
def regenerate_invite(
    db: Session = Depends(get_db),
    member: CurrentMember = Depends(get_current_member),
) -> dict[str, Any]:
    try:
        code = household_service.regenerate_invite(db, member.household_id, member.role)
    except AppError as e:
        raise app_error_to_http(e) from e
    return {"invite_code": code}


@router.get("/households/members")
def list_members(
    db: Session = Depends(get_db),
    member: CurrentMember = Depends(get_current_member),
) -> dict[str, Any]:
    return {"members": household_service.list_members(db, member.household_id)}


@router.delete("/households/members/{user_id}", status_code=204)
def remove_member(
    user_id: int,
    db: Session = Depends(get_db),
    member: CurrentMember = Depends(get_current_member),
) -> Response:
    try:
        household_service.remove_member(db, member.household_id, member.role, member.user_id, user_id)
    except AppError as e:
        raise app_error_to_http(e) from e
    return Response(status_code=204)
