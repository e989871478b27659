"""Authentication service layer."""

from __future__ import annotations

import logging
from typing import Optional

from flask_jwt_extended import create_access_token
from sqlalchemy import func, or_

from rentledger.core.activity import services as activity
from rentledger.core.auth.events import AUTH_PASSWORD_CHANGED, AUTH_USER_REGISTERED
from rentledger.core.auth.models import JWTBlocklist
from rentledger.core.auth.password import hash_password, verify_password
from rentledger.core.auth.schemas import RegisterRequest
from rentledger.core.users.models import User
from rentledger.extensions import db

logger = logging.getLogger(__name__)


def authenticate_user(identifier: str, password: str) -> Optional[User]:
    """Return the user if credentials are valid. ``identifier`` is an email or username."""
    ident = identifier.strip().lower()
    user = User.query.filter(or_(func.lower(User.email) == ident, func.lower(User.username) == ident)).first()
    if not user or not user.is_active:
        return None
    if not verify_password(password, user.password_hash):
        return None
    return user


def issue_access_token(user: User) -> str:
    return create_access_token(identity=str(user.id), additional_claims={"username": user.username})


def register_user(payload: RegisterRequest) -> User:
    """Create a user. Raises ValueError on duplicate email/username."""
    if User.query.filter(func.lower(User.email) == payload.email).first():
        raise ValueError("email_already_exists")
    if User.query.filter(func.lower(User.username) == payload.username.lower()).first():
        raise ValueError("username_already_exists")

    user = User(
        username=payload.username,
        email=payload.email,
        currency=payload.currency,
        password_hash=hash_password(payload.password),
    )
    db.session.add(user)
    db.session.flush()  # ensure user.id for the activity record
    activity.record(AUTH_USER_REGISTERED, f"Account {user.username} created", user_id=user.id)
    db.session.commit()
    logger.info("Registered user %s", user.id)
    return user


def change_password(user: User, current_password: str, new_password: str) -> None:
    if not verify_password(current_password, user.password_hash):
        raise ValueError("invalid_credentials")
    user.password_hash = hash_password(new_password)
    activity.record(AUTH_PASSWORD_CHANGED, "Password changed", user_id=user.id)
    db.session.commit()


def revoke_token(jti: str, user_id: Optional[int] = None) -> None:
    if JWTBlocklist.query.filter_by(jti=jti).first():
        return
    db.session.add(JWTBlocklist(jti=jti, created_by=user_id))
    db.session.commit()


def is_token_revoked(jti: str) -> bool:
    return db.session.query(JWTBlocklist.id).filter_by(jti=jti).first() is not None
