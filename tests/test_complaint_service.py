"""
Tests for the complaint record service (create / update / reads / audit).

Covers:
  - create: CRN always generated, caller CRN discarded
  - create: each reference resolved only when its key is present and non-blank
  - create: location derived only from a full coordinate pair
  - create: unknown keys raise ReferenceNotFoundError and nothing is written
  - update: only comments + status change; created_* preserved
  - update: missing id / unknown id
  - stamp_audit_fields: created_* once, last_modified_* always
"""

from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import func, select

from complaint_registry.core.exceptions import (
    NotFoundError,
    ReferenceNotFoundError,
    ValidationError,
)
from complaint_registry.models import db
from complaint_registry.models.complaint import Complaint
from complaint_registry.services import complaint_service
from complaint_registry.services.complaint_input import (
    AssigneeKey,
    ComplaintInput,
    ComplaintTypeKey,
    DepartmentKey,
    StatusKey,
)


def _complaint_count() -> int:
    return db.session.execute(select(func.count(Complaint.id))).scalar()


@pytest.fixture()
def fixed_crn(monkeypatch):
    monkeypatch.setattr(complaint_service, "generate_crn", lambda: "CRN-20261018-0000ABCD")
    return "CRN-20261018-0000ABCD"


# ── Create ───────────────────────────────────────────────────────────────────


class TestCreateComplaint:
    def test_create_resolves_type_location_and_stamps_audit(self, app, refs):
        """Scenario: POTHOLE at (12.9, 77.6) gets type, location, CRN and audit fields."""
        complaint = complaint_service.create_complaint(
            {"complaint_type": {"code": "POTHOLE"}, "latitude": 12.9, "longitude": 77.6}
        )

        assert complaint.id is not None
        assert complaint.complaint_type.id == refs.pothole.id
        assert complaint.complaint_type.name == "Pothole on road"
        assert complaint.location.code == "W-12"
        assert complaint.crn and complaint.crn.startswith("CRN-")
        assert complaint.created_by == app.config["DEFAULT_ACTOR_ID"]
        assert complaint.last_modified_by == app.config["DEFAULT_ACTOR_ID"]
        now = datetime.now(timezone.utc).replace(tzinfo=None)
        assert abs(complaint.created_date.replace(tzinfo=None) - now) < timedelta(minutes=1)

    def test_caller_crn_is_overwritten_by_generator(self, refs, fixed_crn):
        complaint = complaint_service.create_complaint({"crn": "MY-OWN-CRN"})
        assert complaint.crn == fixed_crn

    def test_generated_crns_are_unique(self, refs):
        a = complaint_service.create_complaint({})
        b = complaint_service.create_complaint({})
        assert a.crn != b.crn

    def test_absent_or_blank_type_code_leaves_type_unset(self, refs):
        assert complaint_service.create_complaint({}).complaint_type is None
        assert complaint_service.create_complaint(
            {"complaint_type": {"code": "   "}}
        ).complaint_type is None
        assert complaint_service.create_complaint(
            {"complaint_type": {"name": "Pothole on road"}}
        ).complaint_type is None

    def test_all_references_resolved_to_full_entities(self, refs):
        data = ComplaintInput(
            complaint_type=ComplaintTypeKey(code="STREETLIGHT"),
            status=StatusKey(name="OPEN"),
            department=DepartmentKey(code="ROADS"),
            assignee=AssigneeKey(id=refs.engineer.id),
            comments="Light flickers all night",
        )
        complaint = complaint_service.create_complaint(data)

        assert complaint.complaint_type.code == "STREETLIGHT"
        assert complaint.status.name == "OPEN"
        assert complaint.department.name == "Roads Maintenance"
        assert complaint.assignee.name == "Asha Rao"
        assert complaint.comments == "Light flickers all night"

    def test_explicit_actor_is_recorded(self, refs):
        complaint = complaint_service.create_complaint({}, actor_id=99)
        assert complaint.created_by == 99
        assert complaint.last_modified_by == 99


class TestCoordinateGating:
    def test_both_coordinates_resolve_location(self, refs):
        c = complaint_service.create_complaint({"latitude": 12.97, "longitude": 77.64})
        assert c.location is not None
        # Smallest containing box wins over the enclosing ward
        assert c.location.code == "L-12-3"

    @pytest.mark.parametrize("coords", [
        {"latitude": 12.9},
        {"longitude": 77.6},
        {},
    ])
    def test_partial_or_missing_coordinates_skip_location(self, refs, coords):
        c = complaint_service.create_complaint(coords)
        assert c.location is None
        assert c.latitude == coords.get("latitude")
        assert c.longitude == coords.get("longitude")

    def test_coordinates_outside_every_boundary_raise(self, refs):
        with pytest.raises(ReferenceNotFoundError, match="Boundary"):
            complaint_service.create_complaint({"latitude": 1.0, "longitude": 1.0})
        assert _complaint_count() == 0


class TestCreateFailuresWriteNothing:
    def test_unknown_type_code(self, refs):
        with pytest.raises(ReferenceNotFoundError, match="ComplaintType"):
            complaint_service.create_complaint({"complaint_type": {"code": "NOPE"}})
        assert _complaint_count() == 0

    def test_unknown_status_name(self, refs):
        with pytest.raises(ReferenceNotFoundError, match="ComplaintStatus"):
            complaint_service.create_complaint({"status": {"name": "LOST"}})
        assert _complaint_count() == 0

    def test_unknown_department_after_valid_type(self, refs):
        with pytest.raises(ReferenceNotFoundError, match="Department"):
            complaint_service.create_complaint(
                {"complaint_type": {"code": "POTHOLE"}, "department": {"code": "XXX"}}
            )
        assert _complaint_count() == 0

    def test_unknown_assignee(self, refs):
        with pytest.raises(ReferenceNotFoundError) as exc_info:
            complaint_service.create_complaint({"assignee": {"id": 4242}})
        assert exc_info.value.resource == "Employee"
        assert exc_info.value.resource_id == 4242
        assert _complaint_count() == 0

    def test_reference_error_is_a_not_found_error(self, refs):
        with pytest.raises(NotFoundError):
            complaint_service.create_complaint({"complaint_type": {"code": "NOPE"}})


# ── Update ───────────────────────────────────────────────────────────────────


class TestUpdateComplaint:
    def test_update_comments_and_status(self, refs):
        """Scenario: OPEN → CLOSED with comment, created_date kept, modified refreshed."""
        created = complaint_service.create_complaint(
            {"complaint_type": {"code": "POTHOLE"}, "status": {"name": "OPEN"}}
        )
        cid = created.id
        created_date = created.created_date
        first_modified = created.last_modified_date

        updated = complaint_service.update_complaint(
            {"id": cid, "comments": "resolved", "status": {"name": "CLOSED"}}
        )

        assert updated.status.name == "CLOSED"
        assert updated.comments == "resolved"
        assert updated.created_date == created_date
        assert updated.last_modified_date >= first_modified

    def test_created_fields_survive_update_by_other_actor(self, refs):
        created = complaint_service.create_complaint({}, actor_id=5)
        created_by, created_date, crn = created.created_by, created.created_date, created.crn

        updated = complaint_service.update_complaint({"id": created.id, "comments": "x"}, actor_id=8)

        assert updated.created_by == created_by == 5
        assert updated.created_date == created_date
        assert updated.last_modified_by == 8
        assert updated.crn == crn

    def test_update_ignores_type_department_assignee_and_coordinates(self, refs):
        created = complaint_service.create_complaint({
            "complaint_type": {"code": "POTHOLE"},
            "department": {"code": "ROADS"},
            "latitude": 12.9,
            "longitude": 77.6,
        })
        cid = created.id
        location_id = created.location_id

        updated = complaint_service.update_complaint({
            "id": cid,
            "comments": "only this should change",
            "complaint_type": {"code": "STREETLIGHT"},
            "department": {"code": "WATER"},
            "assignee": {"id": refs.engineer.id},
            "latitude": 12.97,
            "longitude": 77.64,
            "crn": "HIJACK",
        })

        assert updated.complaint_type.code == "POTHOLE"
        assert updated.department.code == "ROADS"
        assert updated.assignee is None
        assert updated.latitude == 12.9
        assert updated.longitude == 77.6
        assert updated.location_id == location_id
        assert updated.crn != "HIJACK"
        assert updated.comments == "only this should change"

    def test_absent_comments_clear_previous_value(self, refs):
        created = complaint_service.create_complaint({"comments": "first"})
        updated = complaint_service.update_complaint({"id": created.id})
        assert updated.comments is None

    def test_blank_status_name_keeps_status(self, refs):
        created = complaint_service.create_complaint({"status": "OPEN"})
        updated = complaint_service.update_complaint({"id": created.id, "status": {"name": ""}})
        assert updated.status.name == "OPEN"

    def test_unknown_status_on_update_rolls_back_comment(self, refs):
        created = complaint_service.create_complaint({"comments": "keep me"})
        cid = created.id
        with pytest.raises(ReferenceNotFoundError):
            complaint_service.update_complaint(
                {"id": cid, "comments": "lost", "status": {"name": "LOST"}}
            )
        assert complaint_service.get_by_id(cid).comments == "keep me"

    def test_update_missing_record_raises_not_found(self, refs):
        with pytest.raises(NotFoundError, match="Complaint id=999"):
            complaint_service.update_complaint({"id": 999, "comments": "x"})

    def test_update_without_id_raises_validation(self, refs):
        with pytest.raises(ValidationError, match="id is required"):
            complaint_service.update_complaint({"comments": "x"})

    def test_update_with_fractional_id_touches_nothing(self, refs):
        created = complaint_service.create_complaint({"comments": "original"})

        with pytest.raises(ValidationError, match="id must be an integer"):
            complaint_service.update_complaint({"id": created.id + 0.5, "comments": "other"})

        assert complaint_service.get_by_id(created.id).comments == "original"

    def test_create_with_fractional_assignee_id_is_rejected(self, refs):
        with pytest.raises(ValidationError, match="assignee.id must be an integer"):
            complaint_service.create_complaint({"assignee": {"id": refs.engineer.id + 0.9}})
        assert db.session.scalar(select(func.count(Complaint.id))) == 0


# ── Reads ────────────────────────────────────────────────────────────────────


class TestReads:
    def test_get_all_and_get_by_id(self, refs):
        a = complaint_service.create_complaint({})
        b = complaint_service.create_complaint({})

        assert [c.id for c in complaint_service.get_all()] == [a.id, b.id]
        assert complaint_service.get_by_id(b.id).crn == b.crn
        assert complaint_service.get_by_id(12345) is None


# ── Audit stamping ───────────────────────────────────────────────────────────


class TestStampAuditFields:
    def test_initialises_created_fields_once(self):
        c = Complaint(crn="CRN-X")
        t1 = datetime(2026, 1, 1, tzinfo=timezone.utc)
        t2 = datetime(2026, 2, 1, tzinfo=timezone.utc)

        complaint_service.stamp_audit_fields(c, 1, now=t1)
        complaint_service.stamp_audit_fields(c, 2, now=t2)

        assert c.created_by == 1
        assert c.created_date == t1
        assert c.last_modified_by == 2
        assert c.last_modified_date == t2

    def test_preexisting_created_fields_are_untouched(self):
        t0 = datetime(2025, 6, 1, tzinfo=timezone.utc)
        c = Complaint(crn="CRN-Y", created_by=7, created_date=t0)

        complaint_service.stamp_audit_fields(c, 3)

        assert c.created_by == 7
        assert c.created_date == t0
        assert c.last_modified_by == 3
        assert c.last_modified_date > t0
