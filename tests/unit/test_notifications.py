"""Tests for notification formatting, the email client and the notifier."""

import json
from unittest.mock import AsyncMock

import httpx
import pytest

from src.config import Settings
from src.exceptions import NotificationError
from src.intake.forms import BUDGET, CONTRACTOR, INSURANCE
from src.notifications.email import EmailClient, get_email_client
from src.notifications.submission import (
    PLACEHOLDER,
    SubmissionNotifier,
    build_notification,
)
from src.schemas.submission import AttachmentMeta, SubmissionRecord


def _record(form, attachments=(), **fields) -> SubmissionRecord:
    return SubmissionRecord(
        kind=form.slug,
        fields={f: fields.get(f) for f in form.fields},
        attachments=list(attachments),
    )


def _email_client(handler) -> EmailClient:
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return EmailClient(
        http=http,
        api_url="https://mail.test/emails",
        api_key="key-123",
        sender="Intake <no-reply@test.pt>",
        recipient="operador@test.pt",
    )


class TestBuildNotification:
    """Test subject/body rendering."""

    def test_subject_has_id_and_name(self):
        subject, _ = build_notification(BUDGET, _record(BUDGET, name="Ana Silva"), 7)
        assert subject == "Novo pedido de orçamento #7: Ana Silva"

    def test_missing_values_use_placeholder(self):
        subject, body = build_notification(CONTRACTOR, _record(CONTRACTOR), 3)

        assert subject.endswith(PLACEHOLDER)
        assert f"Empresa: {PLACEHOLDER}" in body
        assert f"Anos de experiência: {PLACEHOLDER}" in body
        assert "- Sem anexos" in body

    def test_blank_values_use_placeholder(self):
        _, body = build_notification(INSURANCE, _record(INSURANCE, insurer="   "), 1)
        assert f"Seguradora: {PLACEHOLDER}" in body

    def test_body_lists_fields_in_form_order(self):
        _, body = build_notification(
            BUDGET,
            _record(BUDGET, name="Ana Silva", district="Porto", urgency="alta"),
            1,
        )
        lines = body.splitlines()
        name_line = lines.index("Nome: Ana Silva")
        assert lines.index("Distrito: Porto") > name_line
        assert lines.index("Urgência: alta") > lines.index("Distrito: Porto")

    def test_attachments_listed(self):
        attachments = [
            AttachmentMeta(original_name="casa.jpg", size_bytes=2_500_000, media_type="image/jpeg"),
            AttachmentMeta(original_name="apolice.pdf", size_bytes=51200, media_type="application/pdf"),
        ]
        _, body = build_notification(INSURANCE, _record(INSURANCE, attachments=attachments), 9)

        assert "Anexos (2):" in body
        assert "- casa.jpg (image/jpeg, 2.4 MB)" in body
        assert "- apolice.pdf (application/pdf, 50.0 KB)" in body
        assert "Pedido #9 · seguros" in body


class TestEmailClient:
    """Test the provider call."""

    @pytest.mark.asyncio
    async def test_send_posts_message(self):
        captured = {}

        def handler(request: httpx.Request) -> httpx.Response:
            captured["auth"] = request.headers["authorization"]
            captured["body"] = json.loads(request.content)
            return httpx.Response(200, json={"id": "msg_1"})

        client = _email_client(handler)

        message_id = await client.send("Assunto", "Corpo")

        assert message_id == "msg_1"
        assert captured["auth"] == "Bearer key-123"
        assert captured["body"] == {
            "from": "Intake <no-reply@test.pt>",
            "to": ["operador@test.pt"],
            "subject": "Assunto",
            "text": "Corpo",
        }

    @pytest.mark.asyncio
    async def test_non_2xx_raises(self):
        client = _email_client(lambda request: httpx.Response(401, text="invalid key"))

        with pytest.raises(NotificationError, match="401"):
            await client.send("Assunto", "Corpo")

    @pytest.mark.asyncio
    async def test_unreachable_raises(self):
        def handler(request):
            raise httpx.ConnectError("connection refused")

        client = _email_client(handler)

        with pytest.raises(NotificationError, match="unreachable"):
            await client.send("Assunto", "Corpo")

    @pytest.mark.asyncio
    async def test_response_without_json(self):
        client = _email_client(lambda request: httpx.Response(202, text="queued"))
        assert await client.send("Assunto", "Corpo") is None


class TestGetEmailClient:
    """Test client construction from settings."""

    def test_not_configured(self):
        settings = Settings(database_url="postgresql+asyncpg://x/y", email_api_key="")
        assert get_email_client(settings, httpx.AsyncClient()) is None

    def test_configured(self):
        settings = Settings(
            database_url="postgresql+asyncpg://x/y",
            email_api_key="key",
            email_from="no-reply@test.pt",
            notify_email_to="outro@test.pt",
        )
        client = get_email_client(settings, httpx.AsyncClient())
        assert client is not None
        assert client.recipient == "outro@test.pt"


class TestSubmissionNotifier:
    """Test best-effort delivery."""

    @pytest.mark.asyncio
    async def test_success(self, notifier, mock_email_client):
        sent = await notifier.notify(BUDGET, _record(BUDGET, name="Ana Silva"), 1)

        assert sent is True
        subject, body = mock_email_client.send.call_args[0]
        assert "#1" in subject
        assert "Nome: Ana Silva" in body

    @pytest.mark.asyncio
    async def test_send_failure_is_swallowed(self, notifier, mock_email_client):
        mock_email_client.send = AsyncMock(side_effect=NotificationError("provider down"))

        sent = await notifier.notify(BUDGET, _record(BUDGET), 1)

        assert sent is False
        mock_email_client.send.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_unexpected_failure_is_swallowed(self, notifier, mock_email_client):
        mock_email_client.send = AsyncMock(side_effect=RuntimeError("boom"))
        assert await notifier.notify(BUDGET, _record(BUDGET), 1) is False

    @pytest.mark.asyncio
    async def test_unconfigured_client_skips(self):
        notifier = SubmissionNotifier(None)
        assert await notifier.notify(BUDGET, _record(BUDGET), 1) is False
