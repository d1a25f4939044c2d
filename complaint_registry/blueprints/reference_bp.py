"""
Complaint Registry
Reference data blueprint — read-only listings of lookup data.

Endpoints:
    GET /api/v1/complaint-types        ?active=true to hide inactive types
    GET /api/v1/complaint-statuses
    GET /api/v1/departments
    GET /api/v1/boundaries
"""

from flask import Blueprint, jsonify, request

from complaint_registry.services import reference_service

reference_bp = Blueprint("reference", __name__, url_prefix="/api/v1")


def _listing(rows):
    items = [r.to_dict() for r in rows]
    return jsonify({"items": items, "total": len(items)}), 200


@reference_bp.route("/complaint-types", methods=["GET"])
def list_complaint_types():
    active_only = (request.args.get("active") or "").lower() in ("true", "1", "yes")
    return _listing(reference_service.list_complaint_types(active_only=active_only))


@reference_bp.route("/complaint-statuses", methods=["GET"])
def list_complaint_statuses():
    return _listing(reference_service.list_complaint_statuses())


@reference_bp.route("/departments", methods=["GET"])
def list_departments():
    return _listing(reference_service.list_departments())


@reference_bp.route("/boundaries", methods=["GET"])
def list_boundaries():
    return _listing(reference_service.list_boundaries())
