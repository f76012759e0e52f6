from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pawsi.core.config import settings
from pawsi.core.errors import UnauthorizedError


class OperatorPolicy:
    """Allow-list of operator addresses trusted with moderation actions."""

    def __init__(self, emails: list[str]) -> None:
        seen: set[str] = set()
        for email in emails:
            normalized = email.strip().lower()
            if not normalized:
                raise RuntimeError("OPERATOR_EMAILS contains an empty value")
            if '@' not in normalized:
                raise RuntimeError(f"OPERATOR_EMAILS contains an invalid address: {email}")
            seen.add(normalized)
        self._emails = frozenset(seen)

    @property
    def emails(self) -> list[str]:
        return sorted(self._emails)

    def is_operator(self, email: Optional[str]) -> bool:
        if not email:
            return False
        return email.strip().lower() in self._emails

    def ensure_operator(self, email: Optional[str]) -> None:
        # An empty allow-list denies everyone.
        if not self.is_operator(email):
            raise UnauthorizedError('Unauthorized - Admin access required')


@lru_cache
def get_operator_policy() -> OperatorPolicy:
    return OperatorPolicy(list(settings.OPERATOR_EMAILS))


def reset_operator_policy() -> None:
    get_operator_policy.cache_clear()


def operator_emails() -> list[str]:
    return get_operator_policy().emails
