"""
Complaint search — conjunctive filter built from a partially-filled template.

The searchable fields are enumerated here and nowhere else:

    template field         stored column               match
    ─────────────────────  ──────────────────────────  ──────────────────────────
    crn                    complaints.crn              NOT NULL AND ILIKE %term%
    complaint_type.name    complaint_types.name        NOT NULL AND ILIKE %term%
    department.name        departments.name            NOT NULL AND ILIKE %term%
    status.name            complaint_statuses.name     NOT NULL AND ILIKE %term%

A field joins the filter only when the template carries a non-blank value
for it. Matching lowercases both sides and wraps the term in ``%``; LIKE
metacharacters inside the term are escaped and match literally. No
ordering beyond primary key, no pagination.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable

from sqlalchemy import Select, func, select

from complaint_registry.core.exceptions import ValidationError
from complaint_registry.models.complaint import Complaint
from complaint_registry.models.reference import ComplaintStatus, ComplaintType, Department
from complaint_registry.services.complaint_input import ComplaintInput, is_blank

_ESCAPE = "\\"


def _crn_term(template: ComplaintInput) -> str | None:
    return template.crn


def _type_term(template: ComplaintInput) -> str | None:
    return template.complaint_type.name if template.complaint_type else None


def _department_term(template: ComplaintInput) -> str | None:
    return template.department.name if template.department else None


def _status_term(template: ComplaintInput) -> str | None:
    if template.status is None:
        return None
    if template.status.name is None:
        raise ValidationError(
            "status.name is required when searching by status",
            details={"status.name": "missing"},
        )
    return template.status.name


@dataclass(frozen=True)
class SearchField:
    """One searchable (template value → stored column) pair."""

    name: str
    term: Callable[[ComplaintInput], str | None]
    column: Any
    join: Any = None


SEARCH_FIELDS: tuple[SearchField, ...] = (
    SearchField("crn", _crn_term, Complaint.crn),
    SearchField("complaint_type.name", _type_term, ComplaintType.name, Complaint.complaint_type),
    SearchField("department.name", _department_term, Department.name, Complaint.department),
    SearchField("status.name", _status_term, ComplaintStatus.name, Complaint.status),
)


def like_pattern(term: str) -> str:
    """``"Ab%"`` → ``"%ab\\%%"``: lowercased, escaped, wrapped for substring match."""
    escaped = (
        term.lower()
        .replace(_ESCAPE, _ESCAPE * 2)
        .replace("%", _ESCAPE + "%")
        .replace("_", _ESCAPE + "_")
    )
    return f"%{escaped}%"


def active_filters(template: ComplaintInput) -> list[tuple[SearchField, str]]:
    """Return the (field, term) pairs the template actually populates.

    Raises:
        ValidationError: template carries a status without a name.
    """
    active = []
    for field in SEARCH_FIELDS:
        term = field.term(template)
        if not is_blank(term):
            active.append((field, term))
    return active


def build_search_statement(template: ComplaintInput) -> Select:
    """Build the SELECT for ``template``; an empty template selects everything."""
    stmt = select(Complaint)
    for field, term in active_filters(template):
        if field.join is not None:
            stmt = stmt.join(field.join)
        stmt = stmt.where(
            field.column.is_not(None),
            func.lower(field.column).like(like_pattern(term), escape=_ESCAPE),
        )
    return stmt.order_by(Complaint.id)
