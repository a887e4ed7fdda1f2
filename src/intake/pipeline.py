"""Intake pipeline — normalize, persist, notify, respond.

One pipeline serves all form kinds. Persisting is the only step that can
fail the request; once a row exists the caller always gets its id back,
whatever happens to the notification.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Sequence

import structlog
from starlette.datastructures import UploadFile

from src.exceptions import StoreError
from src.intake.attachments import summarize_attachments
from src.intake.forms import FormKind, normalize_fields
from src.notifications.submission import SubmissionNotifier
from src.repositories.submission import SubmissionRepository
from src.schemas.submission import SubmissionRecord

logger = structlog.get_logger()


class IntakeStatus(str, Enum):
    OK = "ok"
    FAILED = "failed"


@dataclass(frozen=True)
class PersistResult:
    submission_id: Optional[int] = None
    error: Optional[StoreError] = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.submission_id is not None


@dataclass(frozen=True)
class IntakeOutcome:
    status: IntakeStatus
    submission_id: Optional[int] = None

    @property
    def ok(self) -> bool:
        return self.status == IntakeStatus.OK


def build_record(
    form: FormKind,
    fields: dict[str, Any],
    files: Sequence[tuple[str, UploadFile]],
) -> SubmissionRecord:
    """Normalize a parsed request into a storable record."""
    return SubmissionRecord(
        kind=form.slug,
        fields=normalize_fields(form, fields),
        attachments=summarize_attachments(files),
    )


class IntakePipeline:
    """Runs one submission through persist and notify."""

    def __init__(self, repository: SubmissionRepository, notifier: SubmissionNotifier):
        self.repository = repository
        self.notifier = notifier

    async def persist(self, form: FormKind, record: SubmissionRecord) -> PersistResult:
        try:
            submission_id = await self.repository.create(form, record)
        except StoreError as e:
            logger.error(
                "submission_store_failed",
                kind=form.slug,
                error=str(e),
                cause=type(e.original_error).__name__ if e.original_error else None,
            )
            return PersistResult(error=e)
        return PersistResult(submission_id=submission_id)

    async def execute(
        self,
        form: FormKind,
        fields: dict[str, Any],
        files: Sequence[tuple[str, UploadFile]] = (),
    ) -> IntakeOutcome:
        record = build_record(form, fields, files)

        logger.info(
            "submission_received",
            kind=form.slug,
            fields=sorted(fields),
            attachments=[a.model_dump() for a in record.attachments],
        )

        result = await self.persist(form, record)
        if not result.ok:
            return IntakeOutcome(status=IntakeStatus.FAILED)

        # The notification outcome never changes the response
        await self.notifier.notify(form, record, result.submission_id)

        return IntakeOutcome(status=IntakeStatus.OK, submission_id=result.submission_id)
