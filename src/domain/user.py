from __future__ import annotations

import re
from collections.abc import Mapping
from datetime import datetime
from typing import Any
from uuid import uuid4

from src.domain.content import utcnow
from src.domain.errors import ValidationError
from src.domain.value_objects import UserRole

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
NAME_MIN = 2


def _check_email(email: str) -> str:
    if not email or not EMAIL_PATTERN.match(email.strip()):
        raise ValidationError("Invalid email format")
    return email.strip().lower()


def _check_name(value: str, label: str) -> str:
    if not value or len(value.strip()) < NAME_MIN:
        raise ValidationError(f"{label} must be at least {NAME_MIN} characters")
    return value.strip()


class UserEntity:
    """Staff account: authors write, editors and admins publish."""

    def __init__(
        self,
        *,
        id: str,
        email: str,
        password_hash: str,
        first_name: str,
        last_name: str,
        role: UserRole,
        is_active: bool,
        created_at: datetime,
        updated_at: datetime,
        last_login: datetime | None = None,
    ) -> None:
        self._id = id
        self._email = email
        self._password_hash = password_hash
        self._first_name = first_name
        self._last_name = last_name
        self._role = role
        self._is_active = is_active
        self._created_at = created_at
        self._updated_at = updated_at
        self._last_login = last_login

    @classmethod
    def create(
        cls,
        *,
        email: str,
        password_hash: str,
        first_name: str,
        last_name: str,
        role: UserRole = UserRole.AUTHOR,
        id: str | None = None,
        now: datetime | None = None,
    ) -> UserEntity:
        stamp = now or utcnow()
        return cls(
            id=id or str(uuid4()),
            email=_check_email(email),
            password_hash=password_hash,
            first_name=_check_name(first_name, "First name"),
            last_name=_check_name(last_name, "Last name"),
            role=role,
            is_active=True,
            created_at=stamp,
            updated_at=stamp,
        )

    @classmethod
    def reconstitute(cls, record: Mapping[str, Any]) -> UserEntity:
        last_login = record.get("last_login")
        return cls(
            id=record["id"],
            email=record["email"],
            password_hash=record["password_hash"],
            first_name=record["first_name"],
            last_name=record["last_name"],
            role=UserRole.from_string(record["role"]),
            is_active=bool(record["is_active"]),
            created_at=datetime.fromisoformat(record["created_at"]),
            updated_at=datetime.fromisoformat(record["updated_at"]),
            last_login=datetime.fromisoformat(last_login) if last_login else None,
        )

    @property
    def id(self) -> str:
        return self._id

    @property
    def email(self) -> str:
        return self._email

    @property
    def password_hash(self) -> str:
        return self._password_hash

    @property
    def first_name(self) -> str:
        return self._first_name

    @property
    def last_name(self) -> str:
        return self._last_name

    @property
    def full_name(self) -> str:
        return f"{self._first_name} {self._last_name}"

    @property
    def role(self) -> UserRole:
        return self._role

    @property
    def is_active(self) -> bool:
        return self._is_active

    @property
    def created_at(self) -> datetime:
        return self._created_at

    @property
    def updated_at(self) -> datetime:
        return self._updated_at

    @property
    def last_login(self) -> datetime | None:
        return self._last_login

    def update_profile(self, changes: Mapping[str, Any], now: datetime | None = None) -> None:
        first_name = self._first_name
        last_name = self._last_name
        email = self._email
        if changes.get("first_name") is not None:
            first_name = _check_name(changes["first_name"], "First name")
        if changes.get("last_name") is not None:
            last_name = _check_name(changes["last_name"], "Last name")
        if changes.get("email") is not None:
            email = _check_email(changes["email"])

        self._first_name, self._last_name, self._email = first_name, last_name, email
        self._updated_at = now or utcnow()

    def update_password(self, password_hash: str, now: datetime | None = None) -> None:
        self._password_hash = password_hash
        self._updated_at = now or utcnow()

    def update_role(self, role: UserRole, now: datetime | None = None) -> None:
        self._role = role
        self._updated_at = now or utcnow()

    def activate(self, now: datetime | None = None) -> None:
        self._is_active = True
        self._updated_at = now or utcnow()

    def deactivate(self, now: datetime | None = None) -> None:
        self._is_active = False
        self._updated_at = now or utcnow()

    def record_login(self, now: datetime | None = None) -> None:
        self._last_login = now or utcnow()

    def can_publish_content(self) -> bool:
        return self._is_active and self._role.can_publish

    def can_perform_admin_actions(self) -> bool:
        return self._is_active and self._role.is_admin
