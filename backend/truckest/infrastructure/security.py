"""Password Security — bcrypt hashing and reset-token generation.

Invariants:
    - Plain passwords never leave this module's call frames
    - Reset tokens are 32 random bytes, hex-encoded (64 chars)
"""

import secrets

import bcrypt

RESET_TOKEN_BYTES = 32
# bcrypt only reads the first 72 bytes; newer releases reject longer input
BCRYPT_MAX_BYTES = 72


def hash_password(password: str, rounds: int = 10) -> str:
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(_encode(password), salt).decode("utf-8")


def verify_password(password: str, hashed: str) -> bool:
    try:
        return bcrypt.checkpw(_encode(password), hashed.encode("utf-8"))
    except ValueError:
        # Malformed stored hash
        return False


def generate_reset_token() -> str:
    return secrets.token_hex(RESET_TOKEN_BYTES)


def _encode(password: str) -> bytes:
    return password.encode("utf-8")[:BCRYPT_MAX_BYTES]
