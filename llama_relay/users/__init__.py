"""User accounts, password hashing and usage accounting."""

from .passwords import hash_password, verify_password
from .store import UsageGate, User, UserStore

__all__ = ["hash_password", "verify_password", "UsageGate", "User", "UserStore"]
