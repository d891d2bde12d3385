from __future__ import annotations

import logging

import httpx

from updoo.config import settings


logger = logging.getLogger(__name__)


class MailerClient:
    """Thin client for the transactional mail provider's HTTP API."""

    def __init__(
        self,
        api_url: str | None = None,
        api_token: str | None = None,
        from_email: str | None = None,
        from_name: str | None = None,
        timeout: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.api_url = settings.mail_api_url if api_url is None else api_url
        self.api_token = settings.mail_api_token if api_token is None else api_token
        self.from_email = from_email or settings.mail_from_email
        self.from_name = from_name or settings.mail_from_name
        self.timeout = timeout or settings.mail_timeout_seconds
        self.transport = transport

    @property
    def configured(self) -> bool:
        return bool(self.api_url and self.api_token)

    def send(self, to_email: str, subject: str, html: str, text: str | None = None) -> str | None:
        payload = {
            "from": {"email": self.from_email, "name": self.from_name},
            "to": [{"email": to_email}],
            "subject": subject,
            "html": html,
        }
        if text:
            payload["text"] = text

        with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
            response = client.post(
                self.api_url,
                json=payload,
                headers={"Authorization": f"Bearer {self.api_token}"},
            )
            response.raise_for_status()
        message_id = response.headers.get("x-message-id")
        logger.debug("Mail %r sent to %s (id=%s)", subject, to_email, message_id)
        return message_id
