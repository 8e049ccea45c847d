"""scrypt password hashing.

Stored form is ``<hex digest>.<salt>`` where the salt is 16 random bytes
rendered as hex and used as the scrypt salt in its text form.
"""

from __future__ import annotations

import hmac
import hashlib
import logging
import secrets

from ..config.auth import (
    PASSWORD_KEY_LEN,
    PASSWORD_SCRYPT_N,
    PASSWORD_SCRYPT_P,
    PASSWORD_SCRYPT_R,
)

logger = logging.getLogger(__name__)


def _derive(password: str, salt: str) -> bytes:
    return hashlib.scrypt(
        password.encode("utf-8"),
        salt=salt.encode("utf-8"),
        n=PASSWORD_SCRYPT_N,
        r=PASSWORD_SCRYPT_R,
        p=PASSWORD_SCRYPT_P,
        dklen=PASSWORD_KEY_LEN,
    )


def hash_password(password: str) -> str:
    salt = secrets.token_hex(16)
    return f"{_derive(password, salt).hex()}.{salt}"


def verify_password(supplied: str, stored: str) -> bool:
    """Constant-time check of ``supplied`` against a stored hash."""
    if not isinstance(stored, str) or stored.count(".") != 1:
        logger.warning("stored password hash has an unexpected format")
        return False
    digest_hex, salt = stored.split(".")
    if not digest_hex or not salt:
        return False
    try:
        expected = bytes.fromhex(digest_hex)
    except ValueError:
        return False
    return hmac.compare_digest(expected, _derive(supplied, salt))


__all__ = ["hash_password", "verify_password"]
