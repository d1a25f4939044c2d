"""
Complaint Registry
Reference data models.

Models:
    - ComplaintType: category of a complaint, looked up by code
    - ComplaintStatus: workflow status, looked up by name
    - Department: owning department, looked up by code
    - Employee: workflow user a complaint is assigned to, looked up by id
    - Boundary: geographic zone, resolved from a coordinate pair

Complaints reference these rows by foreign key; they are never stored as
partial stubs.
"""

from datetime import datetime, timezone

from complaint_registry.models import db


def _utcnow():
    return datetime.now(timezone.utc)


# ── Seed constants ───────────────────────────────────────────────────────────

DEFAULT_COMPLAINT_TYPES = (
    ("POTHOLE", "Pothole on road"),
    ("STREETLIGHT", "Street light not working"),
    ("GARBAGE", "Garbage not collected"),
    ("WATER_LEAK", "Water pipe leakage"),
    ("DRAINAGE", "Blocked drainage"),
)

DEFAULT_COMPLAINT_STATUSES = ("REGISTERED", "OPEN", "IN_PROGRESS", "CLOSED", "REJECTED")

DEFAULT_DEPARTMENTS = (
    ("ROADS", "Roads Maintenance"),
    ("ELEC", "Electrical"),
    ("SANIT", "Sanitation"),
    ("WATER", "Water Supply"),
)


class ComplaintType(db.Model):
    """Complaint category. Input references it by ``code``."""

    __tablename__ = "complaint_types"

    id = db.Column(db.Integer, primary_key=True)
    code = db.Column(db.String(50), unique=True, nullable=False, index=True)
    name = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, default="")
    is_active = db.Column(db.Boolean, default=True, nullable=False)
    created_at = db.Column(db.DateTime(timezone=True), default=_utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "code": self.code,
            "name": self.name,
            "description": self.description,
            "is_active": self.is_active,
        }

    def __repr__(self):
        return f"<ComplaintType {self.code}>"


class ComplaintStatus(db.Model):
    """Workflow status. Input references it by ``name``."""

    __tablename__ = "complaint_statuses"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(50), unique=True, nullable=False, index=True)
    description = db.Column(db.String(300), default="")

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
        }

    def __repr__(self):
        return f"<ComplaintStatus {self.name}>"


class Department(db.Model):
    """Department responsible for a complaint. Input references it by ``code``."""

    __tablename__ = "departments"

    id = db.Column(db.Integer, primary_key=True)
    code = db.Column(db.String(50), unique=True, nullable=False, index=True)
    name = db.Column(db.String(200), nullable=False)

    def to_dict(self):
        return {"id": self.id, "code": self.code, "name": self.name}

    def __repr__(self):
        return f"<Department {self.code}>"


class Employee(db.Model):
    """Workflow user. Input references it by numeric ``id``."""

    __tablename__ = "employees"

    id = db.Column(db.Integer, primary_key=True)
    code = db.Column(db.String(50), unique=True, nullable=True)
    name = db.Column(db.String(200), nullable=False)
    email = db.Column(db.String(255), nullable=True)
    department_id = db.Column(
        db.Integer, db.ForeignKey("departments.id", ondelete="SET NULL"), nullable=True,
    )

    department = db.relationship("Department", foreign_keys=[department_id])

    def to_dict(self):
        return {
            "id": self.id,
            "code": self.code,
            "name": self.name,
            "email": self.email,
            "department_id": self.department_id,
        }

    def __repr__(self):
        return f"<Employee {self.id}: {self.name}>"


class Boundary(db.Model):
    """
    Geographic zone a complaint is mapped to.

    The zone is stored as an axis-aligned bounding box; a point belongs to
    the boundary when it lies inside the box (edges inclusive).
    """

    __tablename__ = "boundaries"

    id = db.Column(db.Integer, primary_key=True)
    code = db.Column(db.String(50), unique=True, nullable=False)
    name = db.Column(db.String(200), nullable=False)
    boundary_type = db.Column(db.String(30), default="ward", comment="zone/ward/locality")
    min_latitude = db.Column(db.Float, nullable=False)
    max_latitude = db.Column(db.Float, nullable=False)
    min_longitude = db.Column(db.Float, nullable=False)
    max_longitude = db.Column(db.Float, nullable=False)

    def to_dict(self):
        return {
            "id": self.id,
            "code": self.code,
            "name": self.name,
            "boundary_type": self.boundary_type,
            "min_latitude": self.min_latitude,
            "max_latitude": self.max_latitude,
            "min_longitude": self.min_longitude,
            "max_longitude": self.max_longitude,
        }

    def __repr__(self):
        return f"<Boundary {self.code}: {self.name}>"
