"""
Service-wide exception hierarchy.

All services raise these types and never catch them locally; blueprints
register handlers against them once and get consistent HTTP status codes.

Usage:
    from complaint_registry.core.exceptions import NotFoundError, ValidationError

    raise NotFoundError(resource="Complaint", resource_id=42)
    raise ReferenceNotFoundError(resource="ComplaintType", key="POTHOLE")
    raise ValidationError("status.name is required", details={"status": "..."})
"""


class NotFoundError(Exception):
    """Raised when a requested record does not exist.

    Maps to HTTP 404.

    Args:
        resource: Human-readable entity name (e.g. "Complaint").
        resource_id: The key that was looked up.
    """

    def __init__(self, resource: str, resource_id: int | str | None = None) -> None:
        self.resource = resource
        self.resource_id = resource_id
        msg = f"{resource}"
        if resource_id is not None:
            msg += f" id={resource_id}"
        msg += " not found"
        super().__init__(msg)


class ReferenceNotFoundError(NotFoundError):
    """Raised when a caller-supplied lookup key does not resolve.

    Covers complaint type codes, status names, department codes, assignee
    ids and coordinates that fall outside every boundary. The key was
    explicitly supplied, so there is no fallback value.

    Maps to HTTP 422: the complaint payload is well-formed but points at
    reference data that does not exist.

    Args:
        resource: Reference entity name (e.g. "ComplaintType").
        key: The code/name/id/coordinates that failed to resolve.
        field: Lookup field name used in the message ("code", "name", ...).
    """

    def __init__(self, resource: str, key, field: str = "code") -> None:
        self.field = field
        super().__init__(resource, key)

    def __str__(self) -> str:
        return f"{self.resource} with {self.field}={self.resource_id!r} not found"


class ValidationError(Exception):
    """Raised when input is structurally incomplete or cannot be coerced.

    Maps to HTTP 422 in blueprint error handlers.

    Args:
        message: Human-readable explanation of what failed.
        details: Optional field-level breakdown for structured API responses.
                 Keys are field names; values are error descriptions.
    """

    def __init__(self, message: str, details: dict | None = None) -> None:
        self.details = details or {}
        super().__init__(message)
