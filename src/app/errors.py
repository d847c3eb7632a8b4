"""
Domain error taxonomy shared by the services and mapped to HTTP by ``app.main``.
"""


class AuthzAdminError(Exception):
    """Base class for caller-visible failures raised by the services."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(AuthzAdminError):
    """Raised when a referenced menu/role/user/element id does not exist."""

    status_code = 404

    def __init__(self, entity: str, identifier: object):
        super().__init__(f"{entity} {identifier!r} not found")
        self.entity = entity
        self.identifier = identifier


class InvalidOperationError(AuthzAdminError):
    """Raised when a well-formed request would violate a domain invariant."""

    status_code = 400


class ConflictError(AuthzAdminError):
    """Raised when a unique business key (menu key, role name, ...) is already taken."""

    status_code = 409


class TransientError(AuthzAdminError):
    """Raised when the persistence layer fails for reasons outside the request (connection loss, timeout)."""

    status_code = 503
