"""Submission notifications — operator email for every stored submission."""

from __future__ import annotations

from typing import Optional

import structlog

from src.intake.forms import FormKind
from src.notifications.email import EmailClient
from src.schemas.submission import AttachmentMeta, SubmissionRecord

logger = structlog.get_logger()

PLACEHOLDER = "Não indicado"

SUBMISSION_TEMPLATE = """{title}

{fields}

Anexos ({attachments_count}):
{attachments}

Pedido #{submission_id} · {kind}"""


def _display(value: Optional[str]) -> str:
    if value is None or not value.strip():
        return PLACEHOLDER
    return value


def _human_size(size_bytes: int) -> str:
    if size_bytes < 1024:
        return f"{size_bytes} B"
    if size_bytes < 1024 * 1024:
        return f"{size_bytes / 1024:.1f} KB"
    return f"{size_bytes / (1024 * 1024):.1f} MB"


def _attachment_line(attachment: AttachmentMeta) -> str:
    name = attachment.original_name or PLACEHOLDER
    return f"- {name} ({attachment.media_type}, {_human_size(attachment.size_bytes)})"


def build_notification(
    form: FormKind,
    record: SubmissionRecord,
    submission_id: int,
) -> tuple[str, str]:
    """Render (subject, body) for a stored submission."""
    name = _display(record.fields.get("name"))
    subject = form.subject.format(id=submission_id, name=name)

    field_lines = "\n".join(
        f"{form.label(field)}: {_display(record.fields.get(field))}"
        for field in form.fields
    )
    attachment_lines = (
        "\n".join(_attachment_line(a) for a in record.attachments)
        or "- Sem anexos"
    )

    body = SUBMISSION_TEMPLATE.format(
        title=subject,
        fields=field_lines,
        attachments_count=len(record.attachments),
        attachments=attachment_lines,
        submission_id=submission_id,
        kind=form.slug,
    )
    return subject, body


class SubmissionNotifier:
    """Best-effort delivery: failures are logged, never raised."""

    def __init__(self, email_client: Optional[EmailClient]):
        self.email_client = email_client

    async def notify(
        self,
        form: FormKind,
        record: SubmissionRecord,
        submission_id: int,
    ) -> bool:
        """Email the operator about a stored submission.

        Returns:
            True if the provider accepted the message
        """
        if self.email_client is None:
            logger.info(
                "submission_notification_skipped",
                kind=form.slug,
                submission_id=submission_id,
            )
            return False

        try:
            subject, body = build_notification(form, record, submission_id)
            message_id = await self.email_client.send(subject, body)
        except Exception as e:
            logger.error(
                "submission_notification_failed",
                kind=form.slug,
                submission_id=submission_id,
                error=str(e),
            )
            return False

        logger.info(
            "submission_notification_sent",
            kind=form.slug,
            submission_id=submission_id,
            message_id=message_id,
        )
        return True
