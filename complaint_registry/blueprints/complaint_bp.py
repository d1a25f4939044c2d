"""
Complaint Registry
Complaint blueprint — record lifecycle and search endpoints.

Endpoints:
    GET   /api/v1/complaints              — all complaints
    POST  /api/v1/complaints              — create (CRN generated, references resolved)
    GET   /api/v1/complaints/<id>         — single complaint
    PUT   /api/v1/complaints/<id>         — update comments + status
    POST  /api/v1/complaints/search       — search by template body

All business logic is delegated to complaint_service. The optional
``X-Actor-Id`` header names the audit actor.
"""

import logging

from flask import Blueprint, jsonify, request

from complaint_registry.blueprints import request_actor_id, request_json_object
from complaint_registry.core.exceptions import (
    NotFoundError,
    ReferenceNotFoundError,
    ValidationError,
)
from complaint_registry.services import complaint_service

logger = logging.getLogger(__name__)

complaint_bp = Blueprint("complaint", __name__, url_prefix="/api/v1/complaints")


# ── Error handlers ────────────────────────────────────────────────────────────


@complaint_bp.errorhandler(ReferenceNotFoundError)
def _handle_reference_not_found(error: ReferenceNotFoundError):
    return jsonify({"error": str(error), "resource": error.resource}), 422


@complaint_bp.errorhandler(NotFoundError)
def _handle_not_found(error: NotFoundError):
    return jsonify({"error": str(error)}), 404


@complaint_bp.errorhandler(ValidationError)
def _handle_validation(error: ValidationError):
    return jsonify({"error": str(error), "details": error.details}), 422


@complaint_bp.errorhandler(Exception)
def _handle_unexpected(error: Exception):
    logger.exception("Unexpected error in complaint_bp endpoint=%s", request.endpoint)
    return jsonify({"error": "Internal server error"}), 500


# ═════════════════════════════════════════════════════════════════════════════
# Reads
# ═════════════════════════════════════════════════════════════════════════════


@complaint_bp.route("", methods=["GET"])
def list_complaints():
    """Return every complaint.

    Returns: { "items": [...], "total": int }
    """
    items = [c.to_dict() for c in complaint_service.get_all()]
    return jsonify({"items": items, "total": len(items)}), 200


@complaint_bp.route("/<int:complaint_id>", methods=["GET"])
def get_complaint(complaint_id: int):
    complaint = complaint_service.get_by_id(complaint_id)
    if complaint is None:
        raise NotFoundError("Complaint", complaint_id)
    return jsonify(complaint.to_dict()), 200


# ═════════════════════════════════════════════════════════════════════════════
# Writes
# ═════════════════════════════════════════════════════════════════════════════


@complaint_bp.route("", methods=["POST"])
def create_complaint():
    """Create a complaint.

    Body: {
        "complaint_type"?: {"code": str} | str,
        "status"?: {"name": str} | str,
        "department"?: {"code": str} | str,
        "assignee"?: {"id": int} | int,
        "latitude"?: float, "longitude"?: float,
        "comments"?: str
    }
    Returns: created complaint (201). Any "crn" or "location" in the body is ignored.
    """
    data = request_json_object()
    complaint = complaint_service.create_complaint(data, actor_id=request_actor_id())
    return jsonify(complaint.to_dict()), 201


@complaint_bp.route("/<int:complaint_id>", methods=["PUT"])
def update_complaint(complaint_id: int):
    """Update a complaint. Only comments and status are applied.

    Body: { "comments"?: str, "status"?: {"name": str} | str }
    """
    data = {**request_json_object(), "id": complaint_id}
    complaint = complaint_service.update_complaint(data, actor_id=request_actor_id())
    return jsonify(complaint.to_dict()), 200


# ═════════════════════════════════════════════════════════════════════════════
# Search
# ═════════════════════════════════════════════════════════════════════════════


@complaint_bp.route("/search", methods=["POST"])
def search_complaints():
    """Search complaints by case-insensitive substring on the populated fields.

    Body: {
        "crn"?: str,
        "complaint_type"?: {"name": str},
        "department"?: {"name": str},
        "status"?: {"name": str} | str
    }
    An empty body returns every complaint; a malformed one is rejected (422).
    Returns: { "items": [...], "total": int }
    """
    template = request_json_object()
    items = [c.to_dict() for c in complaint_service.search(template)]
    return jsonify({"items": items, "total": len(items)}), 200
