"""
Items API: list (active items refreshed on read), create, update, open, consume, delete.
"""
import logging
from datetime import datetime
from typing import Any, Literal

from fastapi import APIRouter, Depends, Query, Response
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from app.api.deps import CurrentMember, get_current_member
from app.core.constants import (
    CUSTOM_FRESH_DAYS_MAX,
    ITEM_CATEGORY_MAX_LENGTH,
    ITEM_CATEGORY_MIN_LENGTH,
    ITEM_NAME_MAX_LENGTH,
    ITEM_QUANTITY_MAX_LENGTH,
)
from app.core.errors import AppError, app_error_to_http
from app.db.session import get_db
from app.services import item_service

router = APIRouter()
logger = logging.getLogger(__name__)


class CreateItemBody(BaseModel):
    name: str = Field(..., min_length=1, max_length=ITEM_NAME_MAX_LENGTH)
    category: str = Field(..., min_length=ITEM_CATEGORY_MIN_LENGTH, max_length=ITEM_CATEGORY_MAX_LENGTH)
    quantity: str = Field(..., min_length=1, max_length=ITEM_QUANTITY_MAX_LENGTH)
    date_added: datetime | None = None
    opened: bool | None = None
    custom_fresh_days: int | None = Field(None, ge=1, le=CUSTOM_FRESH_DAYS_MAX)


class UpdateItemBody(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=ITEM_NAME_MAX_LENGTH)
    category: str | None = Field(None, min_length=ITEM_CATEGORY_MIN_LENGTH, max_length=ITEM_CATEGORY_MAX_LENGTH)
    quantity: str | None = Field(None, min_length=1, max_length=ITEM_QUANTITY_MAX_LENGTH)
    date_added: datetime | None = None
    opened: bool | None = Field(None, description="true, false, or null for unknown")
    custom_fresh_days: int | None = Field(None, ge=1, le=CUSTOM_FRESH_DAYS_MAX)


# --- List ---


@router.get("/items")
def list_items(
    status: Literal["active", "archived"] = Query("active"),
    db: Session = Depends(get_db),
    member: CurrentMember = Depends(get_current_member),
) -> dict[str, Any]:
    rows = item_service.list_items(db, member.household_id, archived=status == "archived")
    return {"items": [item_service.item_to_dict(r) for r in rows]}


# --- Create / update / delete ---


@router.post("/items", status_code=201)
def create_item(
    body: CreateItemBody,
    db: Session = Depends(get_db),
    member: CurrentMember = Depends(get_current_member),
) -> dict[str, Any]:
    item = item_service.create_item(
        db,
        household_id=member.household_id,
        user_id=member.user_id,
        name=body.name,
        category=body.category,
        quantity=body.quantity,
        date_added=body.date_added,
        opened=body.opened if body.opened is not None else False,
        custom_fresh_days=body.custom_fresh_days,
    )
    return {"item": item_service.item_to_dict(item)}


@router.patch("/items/{item_id}")
def update_item(
    item_id: int,
    body: UpdateItemBody,
    db: Session = Depends(get_db),
    member: CurrentMember = Depends(get_current_member),
) -> dict[str, Any]:
    """Partial update: only fields present in the body change (opened may be sent as null)."""
    try:
        item = item_service.update_item(db, member.household_id, item_id, body.model_dump(exclude_unset=True))
    except AppError as e:
        raise app_error_to_http(e) from e
    return {"item": item_service.item_to_dict(item)}


@router.delete("/items/{item_id}", status_code=204)
def delete_item(
    item_id: int,
    db: Session = Depends(get_db),
    member: CurrentMember = Depends(get_current_member),
) -> Response:
    try:
        item_service.delete_item(db, member.household_id, item_id)
    except AppError as e:
        raise app_error_to_http(e) from e
    return Response(status_code=204)


# --- Open / consume ---


@router.post("/items/{item_id}/open")
def open_item(
    item_id: int,
    db: Session = Depends(get_db),
    member: CurrentMember = Depends(get_current_member),
) -> dict[str, Any]:
    try:
        item = item_service.open_item(db, member.household_id, item_id, user_id=member.user_id)
    except AppError as e:
        raise app_error_to_http(e) from e
    return {"item": item_service.item_to_dict(item)}


@router.post("/items/{item_id}/consume")
def consume_item(
    item_id: int,
    db: Session = Depends(get_db),
    member: CurrentMember = Depends(get_current_member),
) -> dict[str, Any]:
    try:
        item = item_service.consume_item(db, member.household_id, item_id, user_id=member.user_id)
    except AppError as e:
        raise app_error_to_http(e) from e
    return {"item": item_service.item_to_dict(item)}
