"""Employee models and the assigned-employee reference."""

from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel

from core.models.fields import EmployeeFields


class Employee(BaseModel):
    """An employee row from the record store."""

    id: str
    name: str
    active: bool = True

    @classmethod
    def from_record(cls, record: dict) -> "Employee":
        fields = record.get("fields", {})
        # Missing flag means active; only an explicit false deactivates
        return cls(
            id=record["id"],
            name=fields.get(EmployeeFields.NAME) or "",
            active=fields.get(EmployeeFields.ACTIVE) is not False,
        )


# =============================================================================
# EMPLOYEE REFERENCE
# =============================================================================


@dataclass(frozen=True)
class ById:
    """Assignment stored as a linked employee record. Authoritative."""

    record_id: str


@dataclass(frozen=True)
class ByName:
    """Assignment stored as a free-text name (legacy rows)."""

    name: str


EmployeeRef = ById | ByName


def parse_employee_ref(raw: Any) -> EmployeeRef | None:
    """
    Parse an assignment field into an EmployeeRef.

    A list is a linked-record field; only its first element counts. A string
    is a legacy name. Empty values mean unassigned.
    """
    if isinstance(raw, list):
        raw = [value for value in raw if value]
        return ById(str(raw[0])) if raw else None
    if isinstance(raw, str) and raw.strip():
        return ByName(raw.strip())
    return None


def ref_matches(ref: EmployeeRef | None, employee_id: str, employee_name: str | None = None) -> bool:
    """
    Whether an assignment points at the given employee.

    ById compares record ids. ByName compares case-insensitively against
    the employee's name, and never matches when no name is known.
    """
    match ref:
        case ById(record_id):
            return record_id == employee_id
        case ByName(name):
            return bool(employee_name) and name.casefold() == employee_name.strip().casefold()
        case _:
            return False
