"""Submission repository — append-only inserts, one table per form kind."""

from __future__ import annotations

import asyncio

import structlog
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.exceptions import StoreError
from src.intake.forms import FormKind
from src.schemas.submission import SubmissionRecord

logger = structlog.get_logger()

DEFAULT_WRITE_TIMEOUT_SECONDS = 10.0


class SubmissionRepository:
    """Writes submissions. Rows are never updated or deleted here."""

    def __init__(
        self,
        db: AsyncSession,
        write_timeout: float = DEFAULT_WRITE_TIMEOUT_SECONDS,
    ):
        self.db = db
        self.write_timeout = write_timeout

    async def _insert(self, form: FormKind, record: SubmissionRecord) -> int:
        row = form.model(**record.to_row())
        self.db.add(row)
        await self.db.flush()
        submission_id = row.id
        await self.db.commit()
        return submission_id

    async def create(self, form: FormKind, record: SubmissionRecord) -> int:
        """Insert a submission and return its generated id.

        The id comes from the table's autoincrement column, so concurrent
        writers never share one.

        Args:
            form: Form kind that owns the table
            record: Normalized submission

        Returns:
            The new row id

        Raises:
            StoreError: The database is unreachable, rejected the row or
                did not answer within the write timeout.
        """
        try:
            submission_id = await asyncio.wait_for(
                self._insert(form, record), timeout=self.write_timeout
            )
        except (SQLAlchemyError, OSError, asyncio.TimeoutError) as e:
            await self._rollback(form)
            raise StoreError(form.slug, e) from e

        logger.info(
            "submission_created",
            kind=form.slug,
            table=form.table_name,
            submission_id=submission_id,
            attachments=len(record.attachments),
        )
        return submission_id

    async def _rollback(self, form: FormKind) -> None:
        try:
            await self.db.rollback()
        except (SQLAlchemyError, OSError) as e:
            logger.warning("submission_rollback_failed", kind=form.slug, error=str(e))
