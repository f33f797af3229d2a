"""Repository helpers for user profiles."""
from __future__ import annotations

from typing import Dict, Iterable, List, Optional

from sqlalchemy.exc import IntegrityError

from eureka.db import app_session
from eureka.db.models import Profile


class ProfileExistsError(Exception):
    """Raised when a profile already exists for the user id."""


def get_profile(user_id: str) -> Optional[Profile]:
    with app_session() as session:
        return session.query(Profile).filter(Profile.user_id == user_id).one_or_none()


def get_profiles(user_ids: Iterable[str]) -> Dict[str, Profile]:
    ids = {uid for uid in user_ids if uid}
    if not ids:
        return {}
    with app_session() as session:
        rows = session.query(Profile).filter(Profile.user_id.in_(ids)).all()
        return {row.user_id: row for row in rows}


def list_profiles() -> List[Profile]:
    with app_session() as session:
        return session.query(Profile).order_by(Profile.created_at.desc(), Profile.id.desc()).all()


def create_profile(user_id: str, username: str, role: str = "user") -> Profile:
    profile = Profile(user_id=user_id, username=username, role=role)
    try:
        with app_session() as session:
            session.add(profile)
    except IntegrityError as exc:
        raise ProfileExistsError("Profile already exists for user") from exc
    return profile


def update_profile(user_id: str, fields: dict) -> Optional[Profile]:
    with app_session() as session:
        profile = session.query(Profile).filter(Profile.user_id == user_id).one_or_none()
        if not profile:
            return None
        for key, value in fields.items():
            setattr(profile, key, value)
        session.flush()
        return profile


__all__ = [
    "ProfileExistsError",
    "get_profile",
    "get_profiles",
    "list_profiles",
    "create_profile",
    "update_profile",
]
