"""Session, seed account and content filter configuration."""

import os


SESSION_COOKIE_NAME = os.getenv("SESSION_COOKIE_NAME", "sid")
SESSION_HEADER_NAME = os.getenv("SESSION_HEADER_NAME", "X-Session-Token")
SESSION_TTL_SECONDS = int(os.getenv("SESSION_TTL_SECONDS", str(60 * 60 * 24 * 7)))  # 1 week
SESSION_COOKIE_SECURE = os.getenv("SESSION_COOKIE_SECURE", "0") == "1"

# Optional admin account created at startup
ADMIN_USERNAME = os.getenv("ADMIN_USERNAME", "")
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "")

# Comma-separated keywords rejected in prompts
BLOCKED_KEYWORDS = tuple(
    keyword.strip().lower()
    for keyword in os.getenv("BLOCKED_KEYWORDS", "").split(",")
    if keyword.strip()
)

# scrypt parameters (N, r, p) and derived key length
PASSWORD_SCRYPT_N = int(os.getenv("PASSWORD_SCRYPT_N", "16384"))
PASSWORD_SCRYPT_R = int(os.getenv("PASSWORD_SCRYPT_R", "8"))
PASSWORD_SCRYPT_P = int(os.getenv("PASSWORD_SCRYPT_P", "1"))
PASSWORD_KEY_LEN = 64


__all__ = [
    "SESSION_COOKIE_NAME",
    "SESSION_HEADER_NAME",
    "SESSION_TTL_SECONDS",
    "SESSION_COOKIE_SECURE",
    "ADMIN_USERNAME",
    "ADMIN_PASSWORD",
    "BLOCKED_KEYWORDS",
    "PASSWORD_SCRYPT_N",
    "PASSWORD_SCRYPT_R",
    "PASSWORD_SCRYPT_P",
    "PASSWORD_KEY_LEN",
]
