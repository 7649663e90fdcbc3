"""
Password hashing helpers built on passlib
"""

import logging

from passlib.context import CryptContext

logger = logging.getLogger(__name__)

# pbkdf2_sha256 is pure python, so no native bcrypt build is required
pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def hash_password(password: str) -> str:
    """Hash a password for storage"""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify password against stored hash"""
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except (ValueError, TypeError) as e:
        logger.error(f"Password verification error: {e}")
        return False


def password_needs_rehash(hashed_password: str) -> bool:
    """True when the stored hash uses deprecated settings"""
    return pwd_context.needs_update(hashed_password)
