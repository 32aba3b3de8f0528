"""
Users API: create a user record, read the caller with their household, update channel preferences.
"""
from typing import Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from app.api.deps import get_current_user
from app.core.constants import USER_NAME_MAX_LENGTH, USER_NAME_MIN_LENGTH
from app.core.errors import AppError, app_error_to_http
from app.db.session import get_db
from app.models.user import User
from app.services import user_service
from app.services.household_service import household_for_user

router = APIRouter()


class CreateUserBody(BaseModel):
    email: str = Field(..., max_length=256, pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
    name: str = Field(..., min_length=USER_NAME_MIN_LENGTH, max_length=USER_NAME_MAX_LENGTH)
    prefs_email: bool = True
    prefs_in_app: bool = True


class PreferencesBody(BaseModel):
    prefs_email: bool | None = None
    prefs_in_app: bool | None = None


@router.post("/users", status_code=201)
def create_user(body: CreateUserBody, db: Session = Depends(get_db)) -> dict[str, Any]:
    try:
        user = user_service.create_user(db, body.email, body.name, body.prefs_email, body.prefs_in_app)
    except AppError as e:
        raise app_error_to_http(e) from e
    return {"user": user_service.user_to_dict(user)}


@router.get("/users/me")
def me(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
) -> dict[str, Any]:
    return {"user": user_service.user_to_dict(user), "household": household_for_user(db, user.id)}


@router.patch("/users/me/preferences")
def update_preferences(
    body: PreferencesBody,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
) -> dict[str, Any]:
    """Only channels present in the body change. Email off logs SKIPPED; in-app off also hides the alert list."""
    try:
        user = user_service.update_preferences(db, user, body.model_dump(exclude_unset=True))
    except AppError as e:
        raise app_error_to_http(e) from e
    return {"user": user_service.user_to_dict(user)}
