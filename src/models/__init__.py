"""SQLAlchemy ORM models."""

from src.models.base import Base
from src.models.submission import (
    BudgetRequest,
    ContractorRegistration,
    InsuranceRequest,
    StateAidRequest,
)

__all__ = [
    "Base",
    "BudgetRequest",
    "InsuranceRequest",
    "StateAidRequest",
    "ContractorRegistration",
]
