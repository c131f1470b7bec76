"""Password hashing and bearer token creation/verification for authentication."""

import binascii
import os
import time
from typing import TYPE_CHECKING, Any

import jwt
from cryptography.exceptions import InvalidKey
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC
from jwt.utils import base64url_decode, base64url_encode

if TYPE_CHECKING:
    from genius.core.config import Settings

# PBKDF2-HMAC-SHA256 parameters; stored hashes are "hex(salt):hex(key)".
PBKDF2_ITERATIONS = 100_000
SALT_BYTES = 16
KEY_BYTES = 32
HASH_DELIMITER = ":"

JWT_ALGORITHM = "HS256"


def _kdf(salt: bytes) -> PBKDF2HMAC:
    # PBKDF2HMAC instances are single-use.
    return PBKDF2HMAC(
        algorithm=hashes.SHA256(),
        length=KEY_BYTES,
        salt=salt,
        iterations=PBKDF2_ITERATIONS,
    )


def hash_password(plain_password: str) -> str:
    """Hash a plain-text password for storage. Do not store plain passwords."""
    salt = os.urandom(SALT_BYTES)
    key = _kdf(salt).derive(plain_password.encode("utf-8"))
    return salt.hex() + HASH_DELIMITER + key.hex()


def verify_password(plain_password: str, stored_hash: str) -> bool:
    """Verify a plain password against a stored hash. Malformed hashes never match."""
    salt_hex, _, key_hex = (stored_hash or "").partition(HASH_DELIMITER)
    if not salt_hex or not key_hex:
        return False
    try:
        salt = bytes.fromhex(salt_hex)
        expected = bytes.fromhex(key_hex)
    except ValueError:
        return False
    try:
        _kdf(salt).verify(plain_password.encode("utf-8"), expected)
    except InvalidKey:
        return False
    return True


def create_access_token(claims: dict[str, Any], settings: "Settings") -> str:
    """Create an HS256 token carrying the given claims plus exp (Unix seconds)."""
    payload: dict[str, Any] = {
        **claims,
        "exp": int(time.time()) + settings.TOKEN_EXPIRE_SECONDS,
    }
    return jwt.encode(
        payload,
        settings.JWT_SECRET.get_secret_value(),
        algorithm=JWT_ALGORITHM,
    )


def decode_access_token(token: str, settings: "Settings") -> dict[str, Any] | None:
    """
    Verify signature and expiry; return the claims (including exp).
    Returns None for any malformed, tampered, or expired token.
    """
    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET.get_secret_value(),
            algorithms=[JWT_ALGORITHM],
        )
        # base64url tolerates stray trailing bits; only the canonical signature text is accepted.
        signature = token.rsplit(".", 1)[-1]
        if base64url_encode(base64url_decode(signature)).decode("ascii") != signature:
            return None
    except (jwt.PyJWTError, binascii.Error, ValueError):
        return None
    return payload
