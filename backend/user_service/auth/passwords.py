"""Password hashing helpers (bcrypt)."""

import bcrypt

from backend.core import config

# bcrypt only reads the first 72 bytes; bcryptjs truncated silently when the
# existing hashes were written, newer bcrypt releases refuse longer input.
MAX_PASSWORD_BYTES = 72


def _encode(password: str) -> bytes:
    return password.encode('utf-8')[:MAX_PASSWORD_BYTES]


def hash_password(password: str) -> str:
    salt = bcrypt.gensalt(rounds=config.BCRYPT_ROUNDS)
    return bcrypt.hashpw(_encode(password), salt).decode('utf-8')


def verify_password(password: str | None, password_hash: str | None) -> bool:
    if not password or not password_hash:
        return False
    try:
        return bcrypt.checkpw(_encode(password), password_hash.encode('utf-8'))
    except ValueError:
        # not a bcrypt hash
        return False
