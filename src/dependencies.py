"""FastAPI dependencies — process-scoped services live on app.state."""

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.config import settings
from src.database import get_db
from src.intake.pipeline import IntakePipeline
from src.notifications.submission import SubmissionNotifier
from src.repositories.submission import SubmissionRepository


def get_notifier(request: Request) -> SubmissionNotifier:
    return request.app.state.notifier


async def get_pipeline(
    db: AsyncSession = Depends(get_db),
    notifier: SubmissionNotifier = Depends(get_notifier),
) -> IntakePipeline:
    """Pipeline wired to this request's session and the shared notifier."""
    repository = SubmissionRepository(db, write_timeout=settings.store_write_timeout_seconds)
    return IntakePipeline(repository, notifier)
