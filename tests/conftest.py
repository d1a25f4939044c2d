"""
Shared pytest fixtures for the Complaint Registry test suite.

Provides:
    - app: Flask application (session-scoped)
    - _setup_db: Database table creation/teardown (session-scoped)
    - session: Per-test DB cleanup w/ rollback + recreate (autouse)
    - client: Flask test client (function-scoped)
    - refs: Pre-created reference rows (types, statuses, departments,
            employee, boundaries)
    - make_complaint: factory inserting Complaint rows directly
"""

from types import SimpleNamespace

import pytest

from complaint_registry import create_app
from complaint_registry.models import db as _db
from complaint_registry.models.complaint import Complaint
from complaint_registry.models.reference import (
    Boundary,
    ComplaintStatus,
    ComplaintType,
    Department,
    Employee,
)


# ── App & DB fixtures ────────────────────────────────────────────────────


@pytest.fixture(scope="session")
def app():
    """Create the Flask application once per test session."""
    return create_app("testing")


@pytest.fixture(scope="session")
def _setup_db(app):
    """Create all tables at session start, drop at end."""
    with app.app_context():
        _db.create_all()
    yield
    with app.app_context():
        _db.drop_all()


@pytest.fixture(autouse=True)
def session(app, _setup_db):
    """Per-test: open app context, rollback after test, recreate tables."""
    with app.app_context():
        yield
        _db.session.rollback()
        _db.drop_all()
        _db.create_all()


@pytest.fixture()
def client(app):
    """Flask test client."""
    return app.test_client()


# ── Reference data ───────────────────────────────────────────────────────


@pytest.fixture()
def refs():
    """Commit a small, fixed reference data set and return it by role."""
    pothole = ComplaintType(code="POTHOLE", name="Pothole on road")
    streetlight = ComplaintType(code="STREETLIGHT", name="Street light not working")
    open_ = ComplaintStatus(name="OPEN")
    in_progress = ComplaintStatus(name="IN_PROGRESS")
    closed = ComplaintStatus(name="CLOSED")
    roads = Department(code="ROADS", name="Roads Maintenance")
    water = Department(code="WATER", name="Water")
    engineer = Employee(code="EMP-7", name="Asha Rao", email="asha@example.org")
    # Ward contains the locality; the locality is the smaller box
    ward = Boundary(
        code="W-12", name="Ward 12", boundary_type="ward",
        min_latitude=12.80, max_latitude=13.00, min_longitude=77.50, max_longitude=77.70,
    )
    locality = Boundary(
        code="L-12-3", name="Indiranagar", boundary_type="locality",
        min_latitude=12.95, max_latitude=12.99, min_longitude=77.62, max_longitude=77.66,
    )
    _db.session.add_all([
        pothole, streetlight, open_, in_progress, closed,
        roads, water, engineer, ward, locality,
    ])
    _db.session.commit()
    return SimpleNamespace(
        pothole=pothole, streetlight=streetlight,
        open=open_, in_progress=in_progress, closed=closed,
        roads=roads, water=water, engineer=engineer,
        ward=ward, locality=locality,
    )


@pytest.fixture()
def make_complaint():
    """Insert a Complaint row directly, bypassing the service pipeline."""

    def _make(crn, complaint_type=None, department=None, status=None, comments=None):
        c = Complaint(
            crn=crn,
            complaint_type=complaint_type,
            department=department,
            status=status,
            comments=comments,
        )
        _db.session.add(c)
        _db.session.commit()
        return c

    return _make
