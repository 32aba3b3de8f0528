"""Users: create an account record and update channel preferences."""
from typing import Any

from sqlalchemy.orm import Session

from app.core.errors import EmailInUseError, EmptyUpdateError
from app.models.user import User

PREFERENCE_FIELDS = ("prefs_email", "prefs_in_app")


def normalize_email(email: str) -> str:
    return email.strip().lower()


def create_user(
    db: Session,
    email: str,
    name: str,
    prefs_email: bool = True,
    prefs_in_app: bool = True,
) -> User:
    email = normalize_email(email)
    if db.query(User.id).filter(User.email == email).first() is not None:
        raise EmailInUseError()
    user = User(email=email, name=name.strip(), prefs_email=prefs_email, prefs_in_app=prefs_in_app)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def update_preferences(db: Session, user: User, changes: dict[str, Any]) -> User:
    """Set prefs_email / prefs_in_app. None values and unknown keys are ignored."""
    changes = {k: v for k, v in changes.items() if k in PREFERENCE_FIELDS and v is not None}
    if not changes:
        raise EmptyUpdateError()
    for field, value in changes.items():
        setattr(user, field, bool(value))
    db.commit()
    db.refresh(user)
    return user


def user_to_dict(user: User) -> dict[str, Any]:
    return {
        "id": user.id,
        "email": user.email,
        "name": user.name,
        "prefs_email": user.prefs_email,
        "prefs_in_app": user.prefs_in_app,
    }
