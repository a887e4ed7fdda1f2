"""Submission models — one append-only table per form kind."""

from typing import Any, Optional

from sqlalchemy import JSON, Text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from src.models.base import Base, IntIdMixin, TimestampMixin

# Ordered list of {field_name, original_name, size_bytes, media_type}
AttachmentsType = JSON().with_variant(JSONB(), "postgresql")


class SubmissionMixin(IntIdMixin, TimestampMixin):
    # Contact info shared by every form
    name: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    email: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    phone: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    attachments: Mapped[list[dict[str, Any]]] = mapped_column(
        AttachmentsType, nullable=False, default=list
    )


class BudgetRequest(Base, SubmissionMixin):
    __tablename__ = "budget_requests"

    address: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    district: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    damage_type: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    urgency: Mapped[Optional[str]] = mapped_column(Text, nullable=True)


class InsuranceRequest(Base, SubmissionMixin):
    __tablename__ = "insurance_requests"

    address: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    insurer: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    policy_number: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)


class StateAidRequest(Base, SubmissionMixin):
    __tablename__ = "state_aid_requests"

    address: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    tax_id: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    aid_type: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)


class ContractorRegistration(Base, SubmissionMixin):
    __tablename__ = "contractor_registrations"

    company: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    tax_id: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    district: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    specialties: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    years_experience: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
