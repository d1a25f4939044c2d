"""
Complaint reference number (CRN) generator.

Format: {PREFIX}-{YYYYMMDD}-{SUFFIX}   (e.g. CRN-20261018-3FA85F64)

PREFIX comes from the CRN_PREFIX config value. SUFFIX is the first eight
hex digits of a uuid4, upper-cased. A candidate that already exists in
storage is discarded and redrawn.
"""

import logging
import uuid
from datetime import datetime, timezone

from flask import current_app
from sqlalchemy import func, select

from complaint_registry.models import db
from complaint_registry.models.complaint import Complaint

logger = logging.getLogger(__name__)

_MAX_ATTEMPTS = 5


def _candidate(prefix: str) -> str:
    stamp = datetime.now(timezone.utc).strftime("%Y%m%d")
    return f"{prefix}-{stamp}-{uuid.uuid4().hex[:8].upper()}"


def _exists(crn: str) -> bool:
    count = db.session.execute(
        select(func.count(Complaint.id)).where(Complaint.crn == crn)
    ).scalar()
    return bool(count)


def generate_crn() -> str:
    """Return a new reference number not yet used by any complaint."""
    prefix = current_app.config.get("CRN_PREFIX", "CRN")
    for _ in range(_MAX_ATTEMPTS):
        crn = _candidate(prefix)
        if not _exists(crn):
            return crn
        logger.warning("CRN collision, redrawing: %s", crn)
    # Five collisions on 32 random bits means storage is in a bad state.
    raise RuntimeError(f"Could not generate a unique CRN after {_MAX_ATTEMPTS} attempts")
