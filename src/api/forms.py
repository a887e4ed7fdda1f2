"""Form intake API — one POST endpoint per form kind."""

import structlog
from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import JSONResponse

from src.config import settings
from src.dependencies import get_pipeline
from src.exceptions import PayloadTooLargeError
from src.intake.forms import FORM_KINDS, FormKind
from src.intake.pipeline import IntakePipeline
from src.intake.request_parser import parse_submission_request
from src.schemas.submission import SubmissionAccepted, SubmissionFailed

logger = structlog.get_logger()

router = APIRouter(tags=["forms"])


def _make_endpoint(form: FormKind):
    async def submit(
        request: Request,
        pipeline: IntakePipeline = Depends(get_pipeline),
    ) -> JSONResponse:
        try:
            parsed = await parse_submission_request(
                request,
                max_body_bytes=settings.max_body_bytes,
                max_file_bytes=settings.max_file_bytes,
                max_files=settings.max_files,
            )
        except PayloadTooLargeError as e:
            logger.warning("submission_too_large", kind=form.slug, error=str(e))
            raise HTTPException(status_code=413, detail=str(e))
        except ValueError as e:
            # json.JSONDecodeError, UnicodeDecodeError and oversized ints alike
            logger.warning("submission_invalid_json", kind=form.slug, error=str(e)[:200])
            raise HTTPException(status_code=400, detail="Invalid JSON body")

        try:
            outcome = await pipeline.execute(form, parsed.fields, parsed.files)
        finally:
            await parsed.close()

        if not outcome.ok:
            return JSONResponse(status_code=500, content=SubmissionFailed().model_dump())
        return JSONResponse(
            content=SubmissionAccepted(id=outcome.submission_id).model_dump()
        )

    submit.__doc__ = f"Accept a {form.slug} submission, store it and notify the operator."
    return submit


for _form in FORM_KINDS:
    router.add_api_route(
        _form.path,
        _make_endpoint(_form),
        methods=["POST"],
        name=f"submit_{_form.slug.replace('-', '_')}",
        response_model=SubmissionAccepted,
        responses={500: {"model": SubmissionFailed}},
    )
