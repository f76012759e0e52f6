"""Owner secrets for listings published without an account.

A listing's creator receives a six digit code exactly once; only its bcrypt
hash is stored. Possession of the code is the capability to manage the
listing later. The cleartext never reaches the database or the logs.
"""

import secrets
from functools import lru_cache
from typing import Optional

from passlib.context import CryptContext

from pawsi.core.config import settings

SECRET_MIN = 100000
SECRET_SPAN = 900000


@lru_cache
def _secret_context() -> CryptContext:
    return CryptContext(
        schemes=['bcrypt'],
        deprecated='auto',
        bcrypt__rounds=settings.OWNER_SECRET_BCRYPT_ROUNDS,
    )


@lru_cache
def _decoy_hash() -> str:
    # Verified against when the listing does not exist, so a miss costs the same as a wrong code.
    return _secret_context().hash(str(SECRET_MIN + secrets.randbelow(SECRET_SPAN)))


def generate_secret() -> str:
    return str(SECRET_MIN + secrets.randbelow(SECRET_SPAN))


def hash_secret(secret: str) -> str:
    return _secret_context().hash(secret)


def verify_secret(secret: Optional[str], secret_hash: Optional[str]) -> bool:
    if not secret:
        return False
    if not secret_hash:
        burn_verification(secret)
        return False
    try:
        return _secret_context().verify(secret, secret_hash)
    except (ValueError, TypeError):
        return False


def burn_verification(secret: str) -> None:
    _secret_context().verify(secret, _decoy_hash())
