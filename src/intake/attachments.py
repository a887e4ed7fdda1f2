"""Attachment summarizer — keeps what we know about an upload, drops the bytes."""

from __future__ import annotations

import os
from typing import Sequence

from starlette.datastructures import UploadFile

from src.schemas.submission import AttachmentMeta

DEFAULT_MEDIA_TYPE = "application/octet-stream"


def _measure(upload: UploadFile) -> int:
    """Size of an upload whose parser did not record one."""
    if upload.size is not None:
        return upload.size

    spooled = upload.file
    position = spooled.tell()
    try:
        return spooled.seek(0, os.SEEK_END)
    finally:
        spooled.seek(position)


def summarize_attachments(
    files: Sequence[tuple[str, UploadFile]],
) -> list[AttachmentMeta]:
    """Map (field name, upload) pairs to metadata records, in arrival order.

    Never rejects a file: size ceilings are enforced by the request parser.
    """
    return [
        AttachmentMeta(
            field_name=field_name,
            original_name=upload.filename or "",
            size_bytes=_measure(upload),
            media_type=upload.content_type or DEFAULT_MEDIA_TYPE,
        )
        for field_name, upload in files
    ]
