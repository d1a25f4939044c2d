"""
Complaint record service — create, update, read and search complaints.

Transaction policy: create_complaint and update_complaint are each one unit
of work. Every reference is resolved before the single commit; if any step
raises, the session is rolled back and the error propagates unchanged.
Reads never commit.

Functions:
    - get_all:            every complaint, primary-key order
    - get_by_id:          complaint or None
    - create_complaint:   generate CRN, resolve references, stamp audit, save
    - update_complaint:   overlay comments + status onto the stored record
    - search:             conjunctive case-insensitive substring filter
    - stamp_audit_fields: created_* once, last_modified_* always

Only ``comments`` and ``status`` are mutable after creation. Type,
department, assignee and coordinates supplied to update_complaint are
ignored.
"""

import logging
from datetime import datetime, timezone

from flask import current_app
from sqlalchemy import select

from complaint_registry.core.exceptions import (
    NotFoundError,
    ReferenceNotFoundError,
    ValidationError,
)
from complaint_registry.models import db
from complaint_registry.models.complaint import Complaint
from complaint_registry.services import reference_service
from complaint_registry.services.complaint_input import ComplaintInput, is_blank
from complaint_registry.services.complaint_search import build_search_statement
from complaint_registry.services.crn_generator import generate_crn

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _as_input(data, scalar_key: str = "code") -> ComplaintInput:
    if isinstance(data, ComplaintInput):
        return data
    return ComplaintInput.from_dict(data, scalar_key=scalar_key)


def _resolve_actor(actor_id: int | None) -> int:
    if actor_id is not None:
        return actor_id
    return current_app.config.get("DEFAULT_ACTOR_ID", 1)


# ── Reads ────────────────────────────────────────────────────────────────────


def get_all() -> list[Complaint]:
    return list(db.session.execute(select(Complaint).order_by(Complaint.id)).scalars())


def get_by_id(complaint_id: int) -> Complaint | None:
    return db.session.get(Complaint, complaint_id)


# ── Audit ────────────────────────────────────────────────────────────────────


def stamp_audit_fields(complaint: Complaint, actor_id: int, now: datetime | None = None) -> None:
    """Initialise created_by/created_date once; refresh last_modified_* always."""
    now = now or _utcnow()
    if complaint.created_by is None:
        complaint.created_by = actor_id
    if complaint.created_date is None:
        complaint.created_date = now
    complaint.last_modified_date = now
    complaint.last_modified_by = actor_id


# ── Field population (create path) ───────────────────────────────────────────


def _populate_crn(complaint: Complaint) -> None:
    complaint.crn = generate_crn()


def _populate_complaint_type(complaint: Complaint, data: ComplaintInput) -> None:
    if data.complaint_type is not None and not is_blank(data.complaint_type.code):
        complaint.complaint_type = reference_service.get_complaint_type_by_code(
            data.complaint_type.code
        )


def _populate_status(complaint: Complaint, data: ComplaintInput) -> None:
    if data.status is not None and not is_blank(data.status.name):
        complaint.status = reference_service.get_complaint_status_by_name(data.status.name)


def _populate_location(complaint: Complaint, data: ComplaintInput) -> None:
    if data.latitude is not None and data.longitude is not None:
        complaint.location = reference_service.get_boundary_by_coordinates(
            data.longitude, data.latitude
        )
    elif data.latitude is not None or data.longitude is not None:
        logger.debug("Only one coordinate supplied; location left unset")


def _populate_assignee(complaint: Complaint, data: ComplaintInput) -> None:
    if data.assignee is not None and data.assignee.id is not None:
        employee = reference_service.get_employee_by_id(data.assignee.id)
        if employee is None:
            raise ReferenceNotFoundError("Employee", data.assignee.id, field="id")
        complaint.assignee = employee


def _populate_department(complaint: Complaint, data: ComplaintInput) -> None:
    if data.department is not None and not is_blank(data.department.code):
        complaint.department = reference_service.get_department_by_code(data.department.code)


# ── Write operations ─────────────────────────────────────────────────────────


def create_complaint(data, actor_id: int | None = None) -> Complaint:
    """Create a complaint, resolving every supplied reference first.

    Any caller-supplied ``crn`` is discarded; a fresh one is generated.
    Absent or blank lookup keys leave the reference unset.

    Args:
        data: ComplaintInput or the equivalent JSON dict.
        actor_id: Audit actor; falls back to config DEFAULT_ACTOR_ID.

    Returns:
        The persisted Complaint.

    Raises:
        ReferenceNotFoundError: a supplied type code, status name, department
            code, assignee id or coordinate pair does not resolve.
        ValidationError: the payload cannot be parsed.
    """
    data = _as_input(data)
    actor = _resolve_actor(actor_id)

    complaint = Complaint(
        latitude=data.latitude,
        longitude=data.longitude,
        comments=data.comments,
    )
    try:
        _populate_crn(complaint)
        _populate_complaint_type(complaint, data)
        _populate_status(complaint, data)
        _populate_location(complaint, data)
        _populate_assignee(complaint, data)
        _populate_department(complaint, data)
        stamp_audit_fields(complaint, actor)

        db.session.add(complaint)
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise

    logger.info(
        "Complaint created",
        extra={"complaint_id": complaint.id, "crn": complaint.crn, "actor_id": actor},
    )
    return complaint


def update_complaint(data, actor_id: int | None = None) -> Complaint:
    """Overlay ``comments`` and ``status`` onto the stored complaint.

    ``comments`` is copied unconditionally, so an absent value clears it.
    ``status`` changes only when a non-blank name is supplied.

    Args:
        data: ComplaintInput or dict; ``id`` selects the stored record.
        actor_id: Audit actor; falls back to config DEFAULT_ACTOR_ID.

    Returns:
        The updated Complaint.

    Raises:
        ValidationError: ``id`` is missing.
        NotFoundError: no complaint has this id.
        ReferenceNotFoundError: the status name does not resolve.
    """
    data = _as_input(data)
    if data.id is None:
        raise ValidationError("id is required to update a complaint", details={"id": "missing"})
    actor = _resolve_actor(actor_id)

    try:
        complaint = db.session.get(Complaint, data.id)
        if complaint is None:
            raise NotFoundError("Complaint", data.id)

        complaint.comments = data.comments
        if data.status is not None and not is_blank(data.status.name):
            complaint.status = reference_service.get_complaint_status_by_name(data.status.name)

        stamp_audit_fields(complaint, actor)
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise

    logger.info(
        "Complaint updated",
        extra={"complaint_id": complaint.id, "crn": complaint.crn, "actor_id": actor},
    )
    return complaint


# ── Search ───────────────────────────────────────────────────────────────────


def search(template) -> list[Complaint]:
    """Return every complaint matching all populated template fields.

    Args:
        template: ComplaintInput or dict; see complaint_search for the
                  searchable fields. A bare scalar complaint_type or
                  department is matched against the name.

    Raises:
        ValidationError: template carries ``status`` without a name.
    """
    template = _as_input(template, scalar_key="name")
    stmt = build_search_statement(template)
    return list(db.session.execute(stmt).scalars())
