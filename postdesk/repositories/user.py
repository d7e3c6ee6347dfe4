from __future__ import annotations

from typing import Optional

from sqlalchemy.exc import IntegrityError

from postdesk.extensions import db
from postdesk.models.user import User
from postdesk.utils.db_retry import retry_db_operation


@retry_db_operation()
def get_user_by_hex_id(hex_id: str) -> Optional[User]:
    return db.session.execute(db.select(User).filter_by(hex_id=hex_id)).scalar_one_or_none()


@retry_db_operation()
def get_user_by_username(username: str) -> Optional[User]:
    return db.session.execute(db.select(User).filter_by(username=username)).scalar_one_or_none()


@retry_db_operation()
def get_user_by_email(email: str) -> Optional[User]:
    return db.session.execute(db.select(User).filter_by(email=email.lower())).scalar_one_or_none()


def create_user(*, username: str, email: str, password_hash: str) -> User:
    user = User(username=username, email=email.lower(), password_hash=password_hash)
    db.session.add(user)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise
    return user
