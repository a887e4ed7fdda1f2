"""Request parser — turns any accepted body into fields plus file parts.

Multipart, JSON and urlencoded bodies are all accepted by every form
endpoint; only multipart can carry files. Unknown content types are
read as an empty submission.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Optional
from urllib.parse import parse_qs

import structlog
from fastapi import Request
from starlette.datastructures import FormData, UploadFile

from src.exceptions import PayloadTooLargeError

logger = structlog.get_logger()

MAX_FORM_FIELDS = 1000
DEFAULT_MAX_FILES = 20


@dataclass
class ParsedRequest:
    fields: dict[str, Any] = field(default_factory=dict)
    files: list[tuple[str, UploadFile]] = field(default_factory=list)
    form: Optional[FormData] = None

    async def close(self) -> None:
        """Release the spooled upload files of a multipart body."""
        if self.form is not None:
            await self.form.close()


def _media_type(request: Request) -> str:
    return request.headers.get("content-type", "").split(";")[0].strip().lower()


def _declared_length(request: Request) -> Optional[int]:
    declared = request.headers.get("content-length")
    if declared and declared.isdigit():
        return int(declared)
    return None


async def _read_limited(request: Request, max_body_bytes: int) -> bytes:
    declared = _declared_length(request)
    if declared is not None and declared > max_body_bytes:
        raise PayloadTooLargeError("request body", max_body_bytes)

    body = bytearray()
    async for chunk in request.stream():
        body.extend(chunk)
        if len(body) > max_body_bytes:
            raise PayloadTooLargeError("request body", max_body_bytes)
    return bytes(body)


def _collapse(pairs: dict[str, list[str]]) -> dict[str, Any]:
    """Single values stay scalars, repeated keys stay lists."""
    return {k: v[0] if len(v) == 1 else v for k, v in pairs.items()}


async def _parse_multipart(
    request: Request,
    max_body_bytes: int,
    max_file_bytes: int,
    max_files: int,
) -> ParsedRequest:
    # Largest body that can still hold max_files legal files plus text fields
    ceiling = max_files * max_file_bytes + max_body_bytes
    declared = _declared_length(request)
    if declared is not None and declared > ceiling:
        raise PayloadTooLargeError("multipart body", ceiling)

    form = await request.form(
        max_files=max_files,
        max_fields=MAX_FORM_FIELDS,
        max_part_size=max_body_bytes,
    )
    parsed = ParsedRequest(form=form)
    values: dict[str, list[str]] = {}
    try:
        for key, value in form.multi_items():
            if isinstance(value, UploadFile):
                if value.size is not None and value.size > max_file_bytes:
                    raise PayloadTooLargeError(
                        f"file '{value.filename}'", max_file_bytes
                    )
                parsed.files.append((key, value))
            else:
                values.setdefault(key, []).append(value)
    except PayloadTooLargeError:
        await parsed.close()
        raise
    parsed.fields = _collapse(values)
    return parsed


async def parse_submission_request(
    request: Request,
    max_body_bytes: int,
    max_file_bytes: int,
    max_files: int = DEFAULT_MAX_FILES,
) -> ParsedRequest:
    """Parse a form submission request.

    The caller owns the result and must ``await parsed.close()`` once the
    uploads are no longer needed.

    Raises:
        PayloadTooLargeError: A body, text part or file is over its ceiling.
        ValueError: The JSON body is malformed, including invalid UTF-8
            and numbers too long to convert.
    """
    media_type = _media_type(request)

    if media_type == "multipart/form-data":
        return await _parse_multipart(request, max_body_bytes, max_file_bytes, max_files)

    if media_type == "application/json":
        body = await _read_limited(request, max_body_bytes)
        if not body.strip():
            return ParsedRequest()
        data = json.loads(body)
        return ParsedRequest(fields=data if isinstance(data, dict) else {})

    if media_type == "application/x-www-form-urlencoded":
        body = await _read_limited(request, max_body_bytes)
        pairs = parse_qs(body.decode("utf-8", errors="replace"), keep_blank_values=True)
        return ParsedRequest(fields=_collapse(pairs))

    logger.debug("submission_unknown_content_type", content_type=media_type or None)
    return ParsedRequest()
