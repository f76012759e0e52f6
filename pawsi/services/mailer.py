from __future__ import annotations

from functools import lru_cache
from typing import Protocol

import httpx
from loguru import logger

from pawsi.core.config import settings
from pawsi.core.errors import DependencyError

RESEND_API_URL = 'https://api.resend.com/emails'


class Mailer(Protocol):
    def send(self, to: str, subject: str, html: str) -> None: ...


class ResendMailer:
    def __init__(self, api_key: str, sender: str, timeout: float) -> None:
        self._api_key = api_key
        self._sender = sender
        self._timeout = timeout

    def send(self, to: str, subject: str, html: str) -> None:
        try:
            with httpx.Client(timeout=self._timeout) as client:
                response = client.post(
                    RESEND_API_URL,
                    headers={
                        'Authorization': f"Bearer {self._api_key}",
                        'Content-Type': 'application/json',
                    },
                    json={'from': self._sender, 'to': [to], 'subject': subject, 'html': html},
                )
                response.raise_for_status()
        except httpx.HTTPError as exc:
            raise DependencyError(f"Email delivery failed: {exc}") from exc
        logger.info('mailer.sent', subject=subject)


class LogMailer:
    """Used when no email provider is configured; keeps the call sites identical."""

    def send(self, to: str, subject: str, html: str) -> None:
        logger.info('mailer.disabled', subject=subject)


@lru_cache
def get_mailer() -> Mailer:
    if settings.RESEND_API_KEY:
        return ResendMailer(settings.RESEND_API_KEY, settings.MAIL_FROM, settings.EMAIL_TIMEOUT_SECONDS)
    return LogMailer()


def reset_mailer() -> None:
    get_mailer.cache_clear()
