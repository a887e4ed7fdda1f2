"""Submission schemas for the intake pipeline and API."""

from typing import Optional

from pydantic import BaseModel, Field


class AttachmentMeta(BaseModel):
    """Metadata of one uploaded file. The bytes themselves are never kept."""

    field_name: str = ""
    original_name: str = ""
    size_bytes: int = 0
    media_type: str = "application/octet-stream"


class SubmissionRecord(BaseModel):
    """Normalized submission, ready to be stored."""

    kind: str
    fields: dict[str, Optional[str]] = Field(default_factory=dict)
    attachments: list[AttachmentMeta] = Field(default_factory=list)

    def to_row(self) -> dict:
        """Column values for the kind's table."""
        return {
            **self.fields,
            "attachments": [a.model_dump() for a in self.attachments],
        }


class SubmissionAccepted(BaseModel):
    ok: bool = True
    id: int


class SubmissionFailed(BaseModel):
    ok: bool = False
    erro: str = "Erro interno"
