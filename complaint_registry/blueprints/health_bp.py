"""
Health check blueprint.

Endpoints:
    GET /api/v1/health/ready  — simple 200 for load balancers
    GET /api/v1/health/live   — database round-trip + reference data counts
"""

import logging
import time

from flask import Blueprint, current_app, jsonify
from sqlalchemy import func, select

from complaint_registry.models import db
from complaint_registry.models.complaint import Complaint
from complaint_registry.models.reference import ComplaintStatus, ComplaintType

logger = logging.getLogger(__name__)

health_bp = Blueprint("health_bp", __name__, url_prefix="/api/v1/health")


@health_bp.route("/ready", methods=["GET"])
def ready():
    """Simple readiness probe — always 200 if app is running."""
    return jsonify({"status": "ok"}), 200


@health_bp.route("/live", methods=["GET"])
def live():
    """Liveness check: database latency and row counts the API depends on."""
    checks = {}
    overall = True

    try:
        t0 = time.perf_counter()
        db.session.execute(db.text("SELECT 1"))
        db_ms = (time.perf_counter() - t0) * 1000
        checks["database"] = {"status": "ok", "latency_ms": round(db_ms, 1)}
    except Exception as exc:
        checks["database"] = {"status": "error", "detail": str(exc)}
        overall = False
        logger.error("Health check — database failed: %s", exc)

    if overall:
        counts = {
            "complaint_types": db.session.execute(select(func.count(ComplaintType.id))).scalar(),
            "complaint_statuses": db.session.execute(select(func.count(ComplaintStatus.id))).scalar(),
            "complaints": db.session.execute(select(func.count(Complaint.id))).scalar(),
        }
        # Empty reference tables mean every coded create will fail
        seeded = bool(counts["complaint_types"]) and bool(counts["complaint_statuses"])
        checks["reference_data"] = {"status": "ok" if seeded else "empty", "counts": counts}

    checks["app"] = {
        "name": "Complaint Registry",
        "debug": current_app.debug,
        "testing": current_app.testing,
    }

    status_code = 200 if overall else 503
    return jsonify({
        "status": "healthy" if overall else "degraded",
        "checks": checks,
    }), status_code
