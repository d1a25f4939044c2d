"""
Complaint Registry
Complaint record model.

Architecture chain: ComplaintType / ComplaintStatus / Department / Employee /
Boundary → Complaint

``crn`` is assigned once by the generator at creation. ``location`` is only
ever derived from ``latitude`` + ``longitude``. Audit columns are stamped by
the service layer, not by column defaults, so ``created_*`` survives updates
untouched.
"""

from complaint_registry.models import db


def _iso(value):
    return value.isoformat() if value else None


class Complaint(db.Model):
    """A citizen complaint with resolved reference data and audit trail."""

    __tablename__ = "complaints"

    id = db.Column(db.Integer, primary_key=True)
    crn = db.Column(db.String(64), unique=True, nullable=False, index=True,
                    comment="Generated reference number, never regenerated")

    complaint_type_id = db.Column(
        db.Integer, db.ForeignKey("complaint_types.id", ondelete="SET NULL"),
        nullable=True, index=True,
    )
    status_id = db.Column(
        db.Integer, db.ForeignKey("complaint_statuses.id", ondelete="SET NULL"),
        nullable=True, index=True,
    )
    department_id = db.Column(
        db.Integer, db.ForeignKey("departments.id", ondelete="SET NULL"),
        nullable=True, index=True,
    )
    assignee_id = db.Column(
        db.Integer, db.ForeignKey("employees.id", ondelete="SET NULL"),
        nullable=True, comment="FK → employees (workflow user)",
    )

    latitude = db.Column(db.Float, nullable=True)
    longitude = db.Column(db.Float, nullable=True)
    location_id = db.Column(
        db.Integer, db.ForeignKey("boundaries.id", ondelete="SET NULL"),
        nullable=True, comment="Derived from latitude + longitude",
    )

    comments = db.Column(db.Text, nullable=True)

    # Audit
    created_by = db.Column(db.Integer, nullable=True)
    created_date = db.Column(db.DateTime(timezone=True), nullable=True)
    last_modified_by = db.Column(db.Integer, nullable=True)
    last_modified_date = db.Column(db.DateTime(timezone=True), nullable=True)

    complaint_type = db.relationship("ComplaintType", foreign_keys=[complaint_type_id])
    status = db.relationship("ComplaintStatus", foreign_keys=[status_id])
    department = db.relationship("Department", foreign_keys=[department_id])
    assignee = db.relationship("Employee", foreign_keys=[assignee_id])
    location = db.relationship("Boundary", foreign_keys=[location_id])

    def to_dict(self):
        return {
            "id": self.id,
            "crn": self.crn,
            "complaint_type": self.complaint_type.to_dict() if self.complaint_type else None,
            "status": self.status.to_dict() if self.status else None,
            "department": self.department.to_dict() if self.department else None,
            "assignee": self.assignee.to_dict() if self.assignee else None,
            "latitude": self.latitude,
            "longitude": self.longitude,
            "location": self.location.to_dict() if self.location else None,
            "comments": self.comments,
            "created_by": self.created_by,
            "created_date": _iso(self.created_date),
            "last_modified_by": self.last_modified_by,
            "last_modified_date": _iso(self.last_modified_date),
        }

    def __repr__(self):
        return f"<Complaint {self.crn}>"
