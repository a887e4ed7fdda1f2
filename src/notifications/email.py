"""Transactional email client — posts messages to a Resend-compatible API."""

from __future__ import annotations

from typing import Optional

import httpx
import structlog

from src.config import Settings
from src.exceptions import NotificationError

logger = structlog.get_logger()


class EmailClient:
    """Sends plain-text emails to the operator mailbox."""

    def __init__(
        self,
        http: httpx.AsyncClient,
        api_url: str,
        api_key: str,
        sender: str,
        recipient: str,
        timeout: float = 10.0,
    ):
        self.http = http
        self.api_url = api_url
        self.api_key = api_key
        self.sender = sender
        self.recipient = recipient
        self.timeout = timeout

    async def send(self, subject: str, text: str) -> Optional[str]:
        """Send one email. No retries.

        Args:
            subject: Subject line
            text: Plain-text body

        Returns:
            Provider message id, when the provider returns one

        Raises:
            NotificationError: Provider unreachable or answered non-2xx
        """
        try:
            response = await self.http.post(
                self.api_url,
                headers={"Authorization": f"Bearer {self.api_key}"},
                json={
                    "from": self.sender,
                    "to": [self.recipient],
                    "subject": subject,
                    "text": text,
                },
                timeout=self.timeout,
            )
        except httpx.HTTPError as e:
            raise NotificationError(f"Email provider unreachable: {e}", e) from e

        if not response.is_success:
            raise NotificationError(
                f"Email provider returned {response.status_code}: {response.text[:200]}"
            )

        try:
            return response.json().get("id")
        except ValueError:
            return None


def get_email_client(settings: Settings, http: httpx.AsyncClient) -> Optional[EmailClient]:
    """Build the email client.

    Returns None if the provider credentials are not configured.
    """
    if not settings.email_api_key or not settings.email_from:
        logger.warning("email_client_not_configured")
        return None

    logger.info(
        "email_client_initialized",
        api_url=settings.email_api_url,
        recipient=settings.notify_email_to,
    )
    return EmailClient(
        http=http,
        api_url=settings.email_api_url,
        api_key=settings.email_api_key,
        sender=settings.email_from,
        recipient=settings.notify_email_to,
        timeout=settings.email_timeout_seconds,
    )
