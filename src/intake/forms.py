"""Form kinds — the per-kind configuration of the intake pipeline.

Every endpoint runs the same pipeline; a FormKind only says which fields
to read, which table to write and how to title the notification.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Optional

from src.models.submission import (
    BudgetRequest,
    ContractorRegistration,
    InsuranceRequest,
    StateAidRequest,
)
from src.models.base import Base

FIELD_LABELS = {
    "name": "Nome",
    "email": "Email",
    "phone": "Telefone",
    "address": "Morada",
    "district": "Distrito",
    "damage_type": "Tipo de dano",
    "description": "Descrição",
    "urgency": "Urgência",
    "insurer": "Seguradora",
    "policy_number": "N.º de apólice",
    "tax_id": "NIF",
    "aid_type": "Tipo de apoio",
    "company": "Empresa",
    "specialties": "Especialidades",
    "years_experience": "Anos de experiência",
}


@dataclass(frozen=True)
class FormKind:
    slug: str
    path: str
    model: type[Base]
    fields: tuple[str, ...]
    subject: str  # formatted with {id} and {name}

    @property
    def table_name(self) -> str:
        return self.model.__tablename__

    def label(self, field: str) -> str:
        return FIELD_LABELS.get(field, field)


BUDGET = FormKind(
    slug="orcamentos",
    path="/api/orcamentos",
    model=BudgetRequest,
    fields=(
        "name", "email", "phone", "address",
        "district", "damage_type", "description", "urgency",
    ),
    subject="Novo pedido de orçamento #{id}: {name}",
)

INSURANCE = FormKind(
    slug="seguros",
    path="/api/seguros",
    model=InsuranceRequest,
    fields=(
        "name", "email", "phone", "address",
        "insurer", "policy_number", "description",
    ),
    subject="Novo pedido de seguro #{id}: {name}",
)

STATE_AID = FormKind(
    slug="apoios-estado",
    path="/api/apoios-estado",
    model=StateAidRequest,
    fields=(
        "name", "email", "phone", "address",
        "tax_id", "aid_type", "description",
    ),
    subject="Novo pedido de apoio do Estado #{id}: {name}",
)

CONTRACTOR = FormKind(
    slug="empreiteiros",
    path="/api/empreiteiros",
    model=ContractorRegistration,
    fields=(
        "name", "email", "phone", "company",
        "tax_id", "district", "specialties", "years_experience",
    ),
    subject="Novo registo de empreiteiro #{id}: {name}",
)

FORM_KINDS: tuple[FormKind, ...] = (BUDGET, INSURANCE, STATE_AID, CONTRACTOR)


def _coerce(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, (list, tuple)):
        parts = [p for p in (_coerce(v) for v in value) if p]
        return ", ".join(parts) if parts else None
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, dict):
        return json.dumps(value, ensure_ascii=False)
    return str(value)


def normalize_fields(form: FormKind, raw: dict[str, Any]) -> dict[str, Optional[str]]:
    """Pick the form's fields out of a parsed body.

    Missing fields become None; nothing is rejected. Numbers are kept as
    their text, JSON objects as JSON text, and multi-valued fields
    (checkbox groups, JSON arrays) are joined with ", ".
    """
    return {field: _coerce(raw.get(field)) for field in form.fields}
