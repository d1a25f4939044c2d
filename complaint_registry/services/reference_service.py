"""
Reference data service — lookups the complaint pipeline resolves against.

Functions:
    - get_complaint_type_by_code:   ComplaintType or ReferenceNotFoundError
    - get_complaint_status_by_name: ComplaintStatus or ReferenceNotFoundError
    - get_department_by_code:       Department or ReferenceNotFoundError
    - get_employee_by_id:           Employee or None (caller decides)
    - get_boundary_by_coordinates:  smallest Boundary containing the point,
                                    or ReferenceNotFoundError
    - list_*:                       reference listings for the API
    - seed_reference_data:          idempotent default rows

Lookups are pure reads; nothing here commits except the seeder.
"""

import logging

from sqlalchemy import select

from complaint_registry.core.exceptions import ReferenceNotFoundError
from complaint_registry.models import db
from complaint_registry.models.reference import (
    DEFAULT_COMPLAINT_STATUSES,
    DEFAULT_COMPLAINT_TYPES,
    DEFAULT_DEPARTMENTS,
    Boundary,
    ComplaintStatus,
    ComplaintType,
    Department,
    Employee,
)

logger = logging.getLogger(__name__)


# ── Lookups ──────────────────────────────────────────────────────────────────


def get_complaint_type_by_code(code: str) -> ComplaintType:
    """Return the complaint type with this exact code.

    Raises:
        ReferenceNotFoundError: no complaint type has this code.
    """
    ct = db.session.execute(
        select(ComplaintType).where(ComplaintType.code == code)
    ).scalar_one_or_none()
    if ct is None:
        raise ReferenceNotFoundError("ComplaintType", code, field="code")
    return ct


def get_complaint_status_by_name(name: str) -> ComplaintStatus:
    """Return the status with this exact name.

    Raises:
        ReferenceNotFoundError: no status has this name.
    """
    st = db.session.execute(
        select(ComplaintStatus).where(ComplaintStatus.name == name)
    ).scalar_one_or_none()
    if st is None:
        raise ReferenceNotFoundError("ComplaintStatus", name, field="name")
    return st


def get_department_by_code(code: str) -> Department:
    """Return the department with this exact code.

    Raises:
        ReferenceNotFoundError: no department has this code.
    """
    dept = db.session.execute(
        select(Department).where(Department.code == code)
    ).scalar_one_or_none()
    if dept is None:
        raise ReferenceNotFoundError("Department", code, field="code")
    return dept


def get_employee_by_id(employee_id: int) -> Employee | None:
    """Return the employee, or None when the id is unknown."""
    return db.session.get(Employee, employee_id)


def get_boundary_by_coordinates(longitude: float, latitude: float) -> Boundary:
    """Resolve a coordinate pair to the boundary that contains it.

    Note the argument order: longitude first, latitude second.
    When zones overlap (a locality inside a ward) the smallest box wins.

    Raises:
        ReferenceNotFoundError: the point lies outside every boundary.
    """
    area = (Boundary.max_latitude - Boundary.min_latitude) * (
        Boundary.max_longitude - Boundary.min_longitude
    )
    stmt = (
        select(Boundary)
        .where(
            Boundary.min_latitude <= latitude,
            Boundary.max_latitude >= latitude,
            Boundary.min_longitude <= longitude,
            Boundary.max_longitude >= longitude,
        )
        .order_by(area, Boundary.id)
        .limit(1)
    )
    boundary = db.session.execute(stmt).scalar_one_or_none()
    if boundary is None:
        raise ReferenceNotFoundError(
            "Boundary", f"({longitude}, {latitude})", field="coordinates",
        )
    return boundary


# ── Listings ─────────────────────────────────────────────────────────────────


def list_complaint_types(active_only: bool = False) -> list[ComplaintType]:
    stmt = select(ComplaintType)
    if active_only:
        stmt = stmt.where(ComplaintType.is_active.is_(True))
    return list(db.session.execute(stmt.order_by(ComplaintType.code)).scalars())


def list_complaint_statuses() -> list[ComplaintStatus]:
    return list(db.session.execute(
        select(ComplaintStatus).order_by(ComplaintStatus.id)
    ).scalars())


def list_departments() -> list[Department]:
    return list(db.session.execute(
        select(Department).order_by(Department.code)
    ).scalars())


def list_boundaries() -> list[Boundary]:
    return list(db.session.execute(
        select(Boundary).order_by(Boundary.code)
    ).scalars())


# ── Seeding ──────────────────────────────────────────────────────────────────


def seed_reference_data() -> int:
    """Insert the default complaint types, statuses and departments.

    Existing rows (matched by code / name) are left as they are, so running
    the seeder twice creates nothing the second time.

    Returns:
        Number of rows created.
    """
    created = 0

    existing_types = set(db.session.execute(select(ComplaintType.code)).scalars())
    for code, name in DEFAULT_COMPLAINT_TYPES:
        if code not in existing_types:
            db.session.add(ComplaintType(code=code, name=name))
            created += 1

    existing_statuses = set(db.session.execute(select(ComplaintStatus.name)).scalars())
    for name in DEFAULT_COMPLAINT_STATUSES:
        if name not in existing_statuses:
            db.session.add(ComplaintStatus(name=name))
            created += 1

    existing_depts = set(db.session.execute(select(Department.code)).scalars())
    for code, name in DEFAULT_DEPARTMENTS:
        if code not in existing_depts:
            db.session.add(Department(code=code, name=name))
            created += 1

    db.session.commit()
    logger.info("Reference data seeded", extra={"rows_created": created})
    return created
