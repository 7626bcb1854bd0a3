"""
Error taxonomy shared by the resolver, the tenant guard and the provisioning saga.
"""

from enum import Enum


class ErrorKind(str, Enum):
    """Error codes carried by Error.code"""

    authentication = "AUTHENTICATION_ERROR"
    authorization = "AUTHORIZATION_ERROR"
    validation = "VALIDATION_ERROR"
    conflict = "CONFLICT_ERROR"
    dependency = "DEPENDENCY_ERROR"
    compensation_failure = "COMPENSATION_FAILURE"
    not_found = "NOT_FOUND"


class TenantIsolationError(Exception):
    """Raised when a tenant-scoped query would be emitted without tenant isolation."""

    def __init__(self, resource: str, role: str, tenant_id=None):
        self.resource = resource
        self.role = role
        self.tenant_id = tenant_id
        super().__init__(
            f"Query on '{resource}' for role '{role}' is missing the tenant constraint"
            f" (tenant_id={tenant_id})"
        )
