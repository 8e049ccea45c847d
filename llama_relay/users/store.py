"""In-memory user accounts and the per-user usage gate.

Users live only for the lifetime of the process. Password hashing is scrypt
and deliberately slow, so the request-path entry points (``register`` and
``verify_credentials``) run it in a worker thread. The store doubles as the
relay's ``UsageGate``: each accepted generation is charged once, at
acceptance, whatever the stream's outcome turns out to be.
"""

from __future__ import annotations

import asyncio
import itertools
import logging
import time
from dataclasses import dataclass, field
from typing import Any, Protocol

from ..config import DEFAULT_USER_QUOTA
from ..errors import AuthenticationError, QuotaExceededError, ValidationError
from .passwords import hash_password, verify_password

logger = logging.getLogger(__name__)


class UsageGate(Protocol):
    async def charge(self, user_id: int | str) -> int:
        """Record one request for ``user_id`` and return the new usage count."""
        ...


@dataclass(slots=True)
class User:
    id: int
    username: str
    password_hash: str
    is_admin: bool = False
    is_active: bool = True
    quota: int = DEFAULT_USER_QUOTA
    usage_count: int = 0
    created_at: float = field(default_factory=time.time)
    last_login: float | None = None

    @property
    def quota_exhausted(self) -> bool:
        return self.quota > 0 and self.usage_count >= self.quota

    @property
    def usage_percentage(self) -> int:
        if self.quota <= 0:
            return 0
        return round(self.usage_count / self.quota * 100)

    def to_public(self) -> dict[str, Any]:
        """Serializable view without the password hash."""
        return {
            "id": self.id,
            "username": self.username,
            "isAdmin": self.is_admin,
            "isActive": self.is_active,
            "quota": self.quota,
            "usageCount": self.usage_count,
            "createdAt": int(self.created_at * 1000),
            "lastLogin": int(self.last_login * 1000) if self.last_login else None,
        }

    def to_profile(self) -> dict[str, Any]:
        profile = self.to_public()
        profile["usagePercentage"] = self.usage_percentage
        return profile


class UserStore:
    """Process-local user registry implementing ``UsageGate``."""

    def __init__(self, default_quota: int = DEFAULT_USER_QUOTA) -> None:
        self.default_quota = default_quota
        self._users: dict[int, User] = {}
        self._by_name: dict[str, int] = {}
        self._ids = itertools.count(1)
        self._lock = asyncio.Lock()

    def create_user(
        self,
        username: str,
        password: str,
        *,
        is_admin: bool = False,
        is_active: bool = True,
        quota: int | None = None,
    ) -> User:
        """Create an account synchronously; meant for startup seeding."""
        self._check_available(username)
        return self._add(username, hash_password(password), is_admin, is_active, quota)

    async def register(self, username: str, password: str) -> User:
        """Create a regular account from a sign-up request.

        Raises:
            ValidationError: The username is empty or already taken.
        """
        if not username.strip():
            raise ValidationError("missing_credentials", "Username and password are required")
        if self.get_user_by_username(username) is not None:
            raise ValidationError("username_taken", "Username already exists")
        password_hash = await asyncio.to_thread(hash_password, password)
        # Another sign-up may have won the name while hashing
        if self.get_user_by_username(username) is not None:
            raise ValidationError("username_taken", "Username already exists")
        user = self._add(username, password_hash, False, True, None)
        user.last_login = time.time()
        return user

    def _check_available(self, username: str) -> None:
        key = username.strip().lower()
        if not key:
            raise ValueError("username is required")
        if key in self._by_name:
            raise ValueError(f"username already exists: {username}")

    def _add(
        self,
        username: str,
        password_hash: str,
        is_admin: bool,
        is_active: bool,
        quota: int | None,
    ) -> User:
        key = username.strip().lower()
        user = User(
            id=next(self._ids),
            username=username.strip(),
            password_hash=password_hash,
            is_admin=is_admin,
            is_active=is_active,
            quota=self.default_quota if quota is None else quota,
        )
        self._users[user.id] = user
        self._by_name[key] = user.id
        logger.info("user created id=%s username=%s admin=%s", user.id, user.username, is_admin)
        return user

    def get_user(self, user_id: int | str) -> User | None:
        try:
            return self._users.get(int(user_id))
        except (TypeError, ValueError):
            return None

    def get_user_by_username(self, username: str) -> User | None:
        user_id = self._by_name.get(username.strip().lower())
        return self._users.get(user_id) if user_id is not None else None

    async def verify_credentials(self, username: str, password: str) -> User | None:
        """Return the user when the password matches, else None."""
        user = self.get_user_by_username(username)
        if user is None:
            logger.info("login failed: unknown username")
            return None
        if not await asyncio.to_thread(verify_password, password, user.password_hash):
            logger.info("login failed: bad password for user id=%s", user.id)
            return None
        user.last_login = time.time()
        return user

    def profile(self, user_id: int | str) -> dict[str, Any] | None:
        user = self.get_user(user_id)
        return user.to_profile() if user else None

    async def charge(self, user_id: int | str) -> int:
        """Charge one generation against the user's quota.

        Raises:
            AuthenticationError: If the user no longer exists.
            QuotaExceededError: If the quota is already used up.
        """
        async with self._lock:
            user = self.get_user(user_id)
            if user is None:
                raise AuthenticationError(f"unknown user {user_id}")
            if user.quota_exhausted:
                raise QuotaExceededError(quota=user.quota, usage=user.usage_count)
            user.usage_count += 1
            return user.usage_count

    def __len__(self) -> int:
        return len(self._users)


__all__ = ["UsageGate", "User", "UserStore"]
