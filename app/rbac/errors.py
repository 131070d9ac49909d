from __future__ import annotations

from collections.abc import Iterable

class AuthzError(Exception):
    """Terminal authorization outcome for the current request.

    ``code`` is stable and always logged, even when the HTTP layer collapses
    several of these into one response.
    """

    code = "authz_error"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.code)

class WorkspaceNotFound(AuthzError):
    code = "workspace_not_found"

class MembershipNotFound(AuthzError):
    code = "membership_not_found"

class ResourceNotFound(AuthzError):
    code = "resource_not_found"

class Forbidden(AuthzError):
    code = "forbidden"

    def __init__(
        self,
        message: str | None = None,
        *,
        reason: str = "insufficient_role",
        missing: Iterable = (),
    ):
        super().__init__(message)
        self.reason = reason
        self.missing = frozenset(missing)

class LastOwnerViolation(AuthzError):
    code = "last_owner_violation"

NOT_FOUND_ERRORS = (WorkspaceNotFound, MembershipNotFound, ResourceNotFound)
