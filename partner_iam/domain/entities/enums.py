"""
Partner IAM Domain Enums

All enumeration types used across domain entities.
"""

from enum import Enum


class MembershipRole(str, Enum):
    """
    Role labels written to Membership.role.

    The column is free text: rows written by older tooling may hold other
    labels, which resolve to partner access.
    """

    superadmin = "superadmin"
    sef_admin = "sef_admin"  # legacy superadmin-equivalent label
    admin = "admin"
    partner = "partner"
    viewer = "viewer"


class AccessRole(str, Enum):
    """Effective role after resolution"""

    superadmin = "superadmin"
    admin = "admin"
    partner = "partner"
    unknown = "unknown"


class DeliverableStatus(str, Enum):
    """Deliverable review status"""

    pending = "pending"
    submitted = "submitted"
    approved = "approved"
    rejected = "rejected"


class SagaState(str, Enum):
    """Provisioning saga states"""

    pending = "pending"
    identity_created = "identity_created"
    membership_created = "membership_created"
    link_generated = "link_generated"
    link_skipped = "link_skipped"
    logged = "logged"
    completed = "completed"
    compensating = "compensating"
    compensated_ok = "compensated_ok"
    compensation_failure = "compensation_failure"
