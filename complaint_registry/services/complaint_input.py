"""
Complaint input and lookup-key value objects.

Callers never hand the service partially-filled entities. Each reference is
carried by a small frozen key object holding only what the lookup needs:

    ComplaintTypeKey(code, name)   — code resolves on create, name filters search
    StatusKey(name)                — name resolves on create/update and filters search
    DepartmentKey(code, name)      — code resolves on create, name filters search
    AssigneeKey(id)                — id resolves on create

``ComplaintInput`` doubles as the create/update payload and as the search
template. ``location`` is not part of it: it is only ever derived from the
coordinate pair.
"""

from __future__ import annotations

from dataclasses import dataclass

from complaint_registry.core.exceptions import ValidationError


def is_blank(value: str | None) -> bool:
    """True for None, empty and whitespace-only strings."""
    return value is None or not str(value).strip()


def _text(value) -> str | None:
    if value is None:
        return None
    return str(value)


def _as_float(value, field: str) -> float | None:
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise ValidationError(f"{field} must be a number", details={field: repr(value)})
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field} must be a number", details={field: repr(value)})


def _as_int(value, field: str) -> int | None:
    if value is None or value == "":
        return None
    if isinstance(value, bool) or (isinstance(value, float) and not value.is_integer()):
        raise ValidationError(f"{field} must be an integer", details={field: repr(value)})
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field} must be an integer", details={field: repr(value)})


def _nested(payload: dict, key: str, scalar_field: str) -> dict | None:
    """Normalise ``{"status": "OPEN"}`` and ``{"status": {"name": "OPEN"}}`` alike."""
    raw = payload.get(key)
    if raw is None:
        return None
    if isinstance(raw, dict):
        return raw
    if isinstance(raw, (str, int, float)) and not isinstance(raw, bool):
        return {scalar_field: raw}
    raise ValidationError(f"{key} must be an object", details={key: repr(raw)})


@dataclass(frozen=True)
class ComplaintTypeKey:
    code: str | None = None
    name: str | None = None


@dataclass(frozen=True)
class StatusKey:
    name: str | None = None


@dataclass(frozen=True)
class DepartmentKey:
    code: str | None = None
    name: str | None = None


@dataclass(frozen=True)
class AssigneeKey:
    id: int | None = None


@dataclass(frozen=True)
class ComplaintInput:
    """Partially-populated complaint as supplied by a caller."""

    id: int | None = None
    crn: str | None = None
    complaint_type: ComplaintTypeKey | None = None
    status: StatusKey | None = None
    department: DepartmentKey | None = None
    assignee: AssigneeKey | None = None
    latitude: float | None = None
    longitude: float | None = None
    comments: str | None = None

    @classmethod
    def from_dict(cls, payload: dict | None, scalar_key: str = "code") -> "ComplaintInput":
        """Build an input from a decoded JSON body.

        Reference keys may be objects or bare scalars:
            {"complaint_type": {"code": "POTHOLE"}}  ==  {"complaint_type": "POTHOLE"}
            {"status": {"name": "OPEN"}}             ==  {"status": "OPEN"}
            {"assignee": {"id": 7}}                  ==  {"assignee": 7}

        A bare scalar for complaint_type/department fills ``scalar_key``:
        the code when creating, the name when the input is a search template.
        Any ``location`` in the payload is ignored.

        Raises:
            ValidationError: payload is not an object, or a coordinate /
                             id cannot be coerced.
        """
        if payload is None:
            payload = {}
        if not isinstance(payload, dict):
            raise ValidationError("Complaint payload must be a JSON object")

        ct = _nested(payload, "complaint_type", scalar_key)
        st = _nested(payload, "status", "name")
        dept = _nested(payload, "department", scalar_key)
        asg = _nested(payload, "assignee", "id")

        return cls(
            id=_as_int(payload.get("id"), "id"),
            crn=_text(payload.get("crn")),
            complaint_type=ComplaintTypeKey(
                code=_text(ct.get("code")), name=_text(ct.get("name")),
            ) if ct is not None else None,
            status=StatusKey(name=_text(st.get("name"))) if st is not None else None,
            department=DepartmentKey(
                code=_text(dept.get("code")), name=_text(dept.get("name")),
            ) if dept is not None else None,
            assignee=AssigneeKey(
                id=_as_int(asg.get("id"), "assignee.id"),
            ) if asg is not None else None,
            latitude=_as_float(payload.get("latitude"), "latitude"),
            longitude=_as_float(payload.get("longitude"), "longitude"),
            comments=_text(payload.get("comments")),
        )
