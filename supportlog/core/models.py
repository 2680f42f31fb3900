"""Data models for support records captured by the call-center forms."""
from __future__ import annotations

from dataclasses import asdict, dataclass, field, fields
from enum import Enum
from typing import Any, Dict, List, Optional

YES = "Sim"
NO = "Não"

STATUS_OPEN = "Aberto"
STATUS_CLOSED = "Fechado"

SIC_OPTIONS = ["Saques", "Depositos", "Sensores", "SmartPower"]

SUBJECT_OPTIONS = [
    ("1100", "1100 - Código"),
    ("1101", "1101 - Código de peças"),
    ("1102", "1102 - Código de mídias"),
    ("1200", "1200 - Dúvida técnica"),
    ("1201", "1201 - Interpretação defeito"),
    ("1202", "1202 - Testes em periféricos"),
    ("1203", "1203 - Sistema de ensinamento"),
    ("1204", "1204 - Status dos sensores"),
    ("1205", "1205 - Diag não carrega"),
    ("1206", "1206 - Erro de HW"),
    ("1207", "1207 - Dúvidas configuração"),
]


class RecordType(str, Enum):
    """Origin form of a record; doubles as the summary mode."""

    GENERAL = "GENERAL"
    VALIDATION = "VALIDATION"
    ESCALATION = "ESCALATION"


def _column(name: str, default: Any = "", **kwargs: Any) -> Any:
    return field(default=default, metadata={"column": name}, **kwargs)


@dataclass
class SupportRecord:
    """A support incident, either a draft held by the form or a stored row."""

    id: Optional[str] = _column("id", None)
    created_at: Optional[str] = _column("created_at", None)
    record_type: RecordType = _column("recordType", RecordType.GENERAL)

    # shared
    start_time: str = _column("startTime")
    end_time: str = _column("endTime")
    task: str = _column("task")
    sr: str = _column("sr")
    analyst_name: str = _column("analystName")
    location_name: str = _column("locationName")

    # general
    subject: str = _column("subject")
    is_escalated: str = _column("isEscalated", NO)
    bank_analyst_name: str = _column("bankAnalystName")
    problem_description: str = _column("problemDescription")
    action_taken: str = _column("actionTaken")
    valid_call: str = _column("validCall", YES)
    training_provided: str = _column("trainingProvided", NO)
    used_acfs: str = _column("usedAcfs", NO)

    # validation
    customer_complaint: str = _column("customerComplaint")
    is_validated: str = _column("isValidated")
    is_action_plan_effective: str = _column("isActionPlanEffective", YES)
    was_part_changed: str = _column("wasPartChanged", NO)
    part_changed_description: str = _column("partChangedDescription")
    used_diag_validation: str = _column("usedDiagValidation", YES)
    used_test_card: str = _column("usedTestCard", NO)
    sic_options: List[str] = field(default_factory=list, metadata={"column": "sicOptions"})
    customer_name: str = _column("customerName")
    customer_badge: str = _column("customerBadge")

    # escalation
    escalation_date: str = _column("escalationDate")
    technician_name: str = _column("technicianName")

    # dashboard
    status: str = _column("status", STATUS_OPEN)
    escalation_validation: str = _column("escalationValidation", NO)

    @property
    def in_escalation_dashboard(self) -> bool:
        return self.record_type == RecordType.ESCALATION or (
            self.record_type == RecordType.GENERAL and self.is_escalated == YES
        )

    def to_dict(self) -> Dict[str, Any]:
        """Return a plain dictionary keyed by attribute name."""

        data = asdict(self)
        data["record_type"] = self.record_type.value
        return data

    def to_row(self, include_identity: bool = False) -> Dict[str, Any]:
        """Return the store row keyed by column name.

        ``id`` and ``created_at`` belong to the store and are left out unless
        explicitly requested.
        """

        row: Dict[str, Any] = {}
        for item in fields(self):
            if item.name in IDENTITY_FIELDS and not include_identity:
                continue
            value = getattr(self, item.name)
            if isinstance(value, RecordType):
                value = value.value
            elif isinstance(value, list):
                value = list(value)
            row[item.metadata["column"]] = value
        return row

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "SupportRecord":
        """Build a record from a store row, ignoring columns we do not know."""

        kwargs: Dict[str, Any] = {}
        for column, value in row.items():
            name = COLUMN_TO_FIELD.get(column)
            if name is None:
                continue
            if name == "record_type":
                value = RecordType(value) if value else RecordType.GENERAL
            elif name == "sic_options":
                value = list(value or [])
            elif name not in IDENTITY_FIELDS and value is None:
                value = ""
            kwargs[name] = value
        return cls(**kwargs)


IDENTITY_FIELDS = frozenset({"id", "created_at"})
FIELD_TO_COLUMN = {item.name: item.metadata["column"] for item in fields(SupportRecord)}
COLUMN_TO_FIELD = {column: name for name, column in FIELD_TO_COLUMN.items()}
