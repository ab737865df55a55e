"""
Domain model for salespeople and administrators.
"""
from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum

from wholesale.domain.errors import InvalidInputError, UnknownReferenceError
from wholesale.domain.ids import time_derived_id


class Role(str, Enum):
    """User role."""
    SALESPERSON = "salesperson"
    ADMIN = "admin"


@dataclass(frozen=True)
class User:
    id: str
    name: str
    email: str
    role: Role = Role.SALESPERSON


class UserDirectory:
    """Users managed from the admin dashboard."""

    def __init__(self, users: Iterable[User] = ()):
        self._users: list[User] = list(users)

    @property
    def users(self) -> list[User]:
        return list(self._users)

    def get(self, user_id: str) -> User | None:
        for user in self._users:
            if user.id == user_id:
                return user
        return None

    def search(self, query: str = "") -> list[User]:
        term = (query or "").lower()
        return [u for u in self._users if term in u.name.lower() or term in u.email.lower()]

    def add(self, name: str, email: str, role: Role, now: datetime) -> User:
        name, email = (name or "").strip(), (email or "").strip()
        if not name or not email:
            raise InvalidInputError("Name and email are required")
        self._check_email_free(email)
        user = User(
            id=time_derived_id("u", now, {u.id for u in self._users}),
            name=name,
            email=email,
            role=Role(role),
        )
        self._users.append(user)
        return user

    def update(
        self,
        user_id: str,
        name: str | None = None,
        email: str | None = None,
        role: Role | None = None,
    ) -> tuple[User, bool]:
        """Apply non-blank changes; returns the user and whether anything changed."""
        current = self._require(user_id)
        changes = {}
        if name and name.strip() and name.strip() != current.name:
            changes["name"] = name.strip()
        if email and email.strip() and email.strip() != current.email:
            self._check_email_free(email.strip(), exclude=user_id)
            changes["email"] = email.strip()
        if role is not None and Role(role) != current.role:
            changes["role"] = Role(role)
        if not changes:
            return current, False

        updated = replace(current, **changes)
        self._users = [updated if u.id == user_id else u for u in self._users]
        return updated, True

    def remove(self, user_id: str) -> User:
        user = self._require(user_id)
        self._users = [u for u in self._users if u.id != user_id]
        return user

    def _require(self, user_id: str) -> User:
        user = self.get(user_id)
        if user is None:
            raise UnknownReferenceError(f"User {user_id} not found")
        return user

    def _check_email_free(self, email: str, exclude: str | None = None) -> None:
        for user in self._users:
            if user.id != exclude and user.email.lower() == email.lower():
                raise InvalidInputError(f"Email {email} is already in use")
