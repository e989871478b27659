"""User service layer."""

from __future__ import annotations

from typing import Optional

from flask import current_app
from sqlalchemy import func

from rentledger.core.users.models import User
from rentledger.extensions import db


def get_user(user_id: int) -> Optional[User]:
    return db.session.get(User, user_id)


def user_currency(user_id: int) -> str:
    user = get_user(user_id)
    if user and user.currency:
        return user.currency
    return current_app.config.get("DEFAULT_CURRENCY", "KES")


def update_profile(user: User, **fields) -> User:
    """Apply profile edits. Raises ValueError on a taken username/email."""
    username = fields.get("username")
    if username and username != user.username:
        taken = User.query.filter(func.lower(User.username) == username.lower(), User.id != user.id).first()
        if taken:
            raise ValueError("username_already_exists")
        user.username = username
    email = fields.get("email")
    if email and email != user.email:
        taken = User.query.filter(func.lower(User.email) == email, User.id != user.id).first()
        if taken:
            raise ValueError("email_already_exists")
        user.email = email
    if fields.get("currency"):
        user.currency = fields["currency"]
    if "profile_photo_url" in fields and fields["profile_photo_url"] is not None:
        user.profile_photo_url = fields["profile_photo_url"]
    db.session.commit()
    return user
