"""
Complaint Registry
Blueprint registry.
"""

from flask import request

from complaint_registry.core.exceptions import ValidationError


def request_actor_id():
    """Read the audit actor from the ``X-Actor-Id`` header.

    Returns:
        int actor id, or None when the header is absent (service falls back
        to DEFAULT_ACTOR_ID).

    Raises:
        ValidationError: header present but not an integer.
    """
    raw = request.headers.get("X-Actor-Id")
    if raw is None or not raw.strip():
        return None
    try:
        return int(raw)
    except ValueError:
        raise ValidationError("X-Actor-Id must be an integer", details={"X-Actor-Id": raw})


def request_json_object():
    """Decode the request body as a JSON object.

    An empty body is an empty object. A body that is not valid JSON, or that
    decodes to something other than an object, raises ValidationError.
    """
    if not request.get_data():
        return {}
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError(
            "Request body must be a JSON object",
            details={"body": "malformed" if data is None else type(data).__name__},
        )
    return data
