import hmac

import bcrypt

from portal.core import config

_BCRYPT_PREFIXES = ('$2a$', '$2b$', '$2y$')


def hash_password(password: str) -> str:
    # bcrypt only looks at the first 72 bytes.
    password_bytes = password.encode('utf-8')[:72]
    hashed = bcrypt.hashpw(password_bytes, bcrypt.gensalt(rounds=config.BCRYPT_ROUNDS))
    return hashed.decode('utf-8')


def is_hashed(stored: str) -> bool:
    return stored.startswith(_BCRYPT_PREFIXES)


def verify_password(plain_password: str, stored: str) -> bool:
    """Check a password against a stored bcrypt hash or a legacy plaintext value."""
    if is_hashed(stored):
        try:
            return bcrypt.checkpw(plain_password.encode('utf-8')[:72], stored.encode('utf-8'))
        except ValueError:
            return False

    if not config.ALLOW_LEGACY_PLAINTEXT_PASSWORDS:
        return False
    return hmac.compare_digest(plain_password.encode('utf-8'), stored.encode('utf-8'))
