# fleet_portal/exceptions.py
"""
Error taxonomy shared by services and routers.
Every error here is recoverable: main.py maps each class to an HTTP status,
so none of them ever takes the process down.

Policy denial on reads is NOT an exception. Restricted records are simply
filtered out (see services/access_policy.py).
"""


class FleetPortalError(Exception):
    """Base class for all portal errors."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(FleetPortalError):
    """Malformed or duplicate input. Raised before any write happens."""

    status_code = 400

    def __init__(self, message: str, field: str | None = None):
        super().__init__(message)
        self.field = field


class DataAccessError(FleetPortalError):
    """Store or network failure at the repository boundary."""

    status_code = 503


class RecordNotFound(FleetPortalError):
    """
    Record does not exist, or exists outside the actor's visible scope.
    Both cases look the same to the caller.
    """

    status_code = 404


class ActionNotAllowed(FleetPortalError):
    """Actor's role may not perform this workflow step."""

    status_code = 403
