"""
Provision Account Use Case

Creates a new identity and its membership as one logical operation.
"""

import logging
import secrets
from typing import List, Optional
from uuid import UUID

from partner_iam.app.services.identity_provider import (
    IIdentityProvider,
    IdentityAlreadyExistsError,
)
from partner_iam.app.services.provisioning_locks import ProvisioningLockRegistry
from partner_iam.app.services.unit_of_work import UnitOfWork
from partner_iam.domain.access import ResolvedAccess
from partner_iam.domain.entities import (
    AccessRole,
    ActivityLogEntry,
    Identity,
    Membership,
    MembershipRole,
    SagaState,
)
from partner_iam.domain.errors import ErrorKind
from partner_iam.domain.result import Error, Result, Return

from .dtos import ProvisionAccountCommand, ProvisionAccountResponse

logger = logging.getLogger(__name__)

REQUESTABLE_ROLES = ("admin", "partner", "viewer")


class ProvisionAccountUseCase:
    """
    Account provisioning saga.

    Preconditions (no side effects before they pass):
    - Requester resolves to admin or superadmin
    - Only a superadmin may create admins
    - email and full_name non-empty, role requestable, partner needs a known tenant
    - No identity with this email and no provisioning in flight for it

    Steps, strictly in order:
    1. Create identity with a one-time credential, email confirmed   (fatal)
    2. Insert membership; admin stores "admin", anything else "viewer" (fatal, compensated)
    3. Generate recovery link                                       (non-fatal)
    4. Append activity log entry                                    (non-fatal)

    A step-2 failure deletes the step-1 identity. If that delete fails the
    caller gets COMPENSATION_FAILURE with the orphaned identity id.
    Nothing is retried.
    """

    def __init__(
        self,
        uow: UnitOfWork,
        identity_provider: IIdentityProvider,
        locks: ProvisioningLockRegistry,
        temp_credential_prefix: str = "Ptl!",
    ):
        self.uow = uow
        self.identity_provider = identity_provider
        self.locks = locks
        self.temp_credential_prefix = temp_credential_prefix

    async def execute(
        self,
        command: ProvisionAccountCommand,
        requester_access: ResolvedAccess,
        requester: Optional[Identity] = None,
    ) -> Result[ProvisionAccountResponse]:
        """
        Execute provisioning saga

        Args:
            command: ProvisionAccountCommand with email, full_name, role, tenant_id
            requester_access: Resolved access of the caller
            requester: Caller identity, recorded in the activity log

        Returns:
            Result[ProvisionAccountResponse], or Error with an ErrorKind code
        """
        precondition = self._check_authorization(command, requester_access)
        if precondition.is_err():
            return precondition

        precondition = self._check_fields(command)
        if precondition.is_err():
            return precondition

        email = command.email.strip().lower()
        if not self.locks.try_acquire(email):
            logger.info("Provisioning already in flight for %s", email)
            return Return.err(
                Error(ErrorKind.conflict.value, "Provisioning already in progress for this email")
            )

        try:
            precondition = await self._check_store(command, email)
            if precondition.is_err():
                return precondition
            return await self._run_saga(command, email, requester)
        finally:
            self.locks.release(email)

    def _check_authorization(
        self, command: ProvisionAccountCommand, requester_access: ResolvedAccess
    ) -> Result[None]:
        if not requester_access.is_admin:
            return Return.err(Error(ErrorKind.authorization.value, "Admin access required"))

        if command.role == MembershipRole.admin.value and not requester_access.is_superadmin:
            return Return.err(
                Error(
                    ErrorKind.authorization.value,
                    "Only superadmins can create admin users",
                )
            )
        return Return.ok(None)

    def _check_fields(self, command: ProvisionAccountCommand) -> Result[None]:
        if not command.email or not command.email.strip():
            return Return.err(Error(ErrorKind.validation.value, "email is required"))
        if not command.full_name or not command.full_name.strip():
            return Return.err(Error(ErrorKind.validation.value, "full_name is required"))
        if command.role not in REQUESTABLE_ROLES:
            return Return.err(
                Error(
                    ErrorKind.validation.value,
                    f"Invalid role: {command.role}. Must be one of: admin, partner, viewer",
                )
            )
        if command.role == MembershipRole.partner.value and not command.tenant_id:
            return Return.err(
                Error(ErrorKind.validation.value, "tenant_id is required for partner users")
            )
        return Return.ok(None)

    async def _check_store(self, command: ProvisionAccountCommand, email: str) -> Result[None]:
        async with self.uow:
            if command.tenant_id and not await self.uow.tenants.exists(command.tenant_id):
                return Return.err(
                    Error(ErrorKind.validation.value, f"Unknown tenant: {command.tenant_id}")
                )

            existing = await self.uow.identities.get_by_email(email)
            if existing is not None:
                return Return.err(Error(ErrorKind.conflict.value, "Email already registered"))

        return Return.ok(None)

    async def _run_saga(
        self, command: ProvisionAccountCommand, email: str, requester: Optional[Identity]
    ) -> Result[ProvisionAccountResponse]:
        states: List[SagaState] = [SagaState.pending]
        # A rollback in a later step expires loaded instances; read ids up front
        actor_id = requester.id if requester else None
        actor_email = requester.email if requester else None
        is_admin_request = command.role == MembershipRole.admin.value

        # Step 1: identity
        try:
            identity_id = await self.identity_provider.create_identity(
                email,
                self._generate_temp_credential(),
                metadata={
                    "full_name": command.full_name,
                    "role": AccessRole.admin.value if is_admin_request else AccessRole.partner.value,
                },
            )
        except IdentityAlreadyExistsError:
            return Return.err(Error(ErrorKind.conflict.value, "Email already registered"))
        except Exception:
            logger.exception("Identity creation failed for %s", email)
            return Return.err(
                Error(ErrorKind.dependency.value, "Identity provider failed to create the identity")
            )
        self._transition(states, SagaState.identity_created, email)

        # Step 2: membership (compensated)
        try:
            async with self.uow:
                membership = await self.uow.memberships.insert(
                    Membership(
                        identity_id=identity_id,
                        tenant_id=command.tenant_id or None,
                        role=(
                            MembershipRole.admin.value
                            if is_admin_request
                            else MembershipRole.viewer.value
                        ),
                        email=email,
                        full_name=command.full_name,
                    )
                )
                membership_id = membership.id
                await self.uow.commit()
        except Exception:
            logger.exception("Membership insert failed for identity %s", identity_id)
            return await self._compensate(identity_id, email, states)
        self._transition(states, SagaState.membership_created, email)

        # Step 3: recovery link (non-fatal)
        recovery_link = None
        try:
            recovery_link = await self.identity_provider.generate_recovery_link(email)
        except Exception:
            logger.warning("Failed to generate recovery link for %s", email, exc_info=True)
        self._transition(
            states,
            SagaState.link_generated if recovery_link else SagaState.link_skipped,
            email,
        )

        # Step 4: activity log (non-fatal)
        try:
            async with self.uow:
                await self.uow.activity_log.append(
                    ActivityLogEntry(
                        activity_type="user_created",
                        actor_id=actor_id,
                        actor_email=actor_email,
                        target_email=email,
                        tenant_id=command.tenant_id or None,
                        description=f"Created {command.role} user: {command.full_name} ({email})",
                        event_metadata={
                            "role": command.role,
                            "tenant_id": command.tenant_id,
                            "identity_id": str(identity_id),
                            "membership_id": str(membership_id),
                        },
                    )
                )
                await self.uow.commit()
            self._transition(states, SagaState.logged, email)
        except Exception:
            logger.warning("Failed to append activity log for %s", email, exc_info=True)

        self._transition(states, SagaState.completed, email)
        return Return.ok(
            ProvisionAccountResponse(
                identity_id=str(identity_id),
                membership_id=str(membership_id),
                recovery_link=recovery_link,
                outcome=SagaState.completed.value,
                states=[s.value for s in states],
            )
        )

    async def _compensate(
        self, identity_id: UUID, email: str, states: List[SagaState]
    ) -> Result[ProvisionAccountResponse]:
        self._transition(states, SagaState.compensating, email)
        try:
            await self.identity_provider.delete_identity(identity_id)
        except Exception:
            self._transition(states, SagaState.compensation_failure, email)
            logger.error(
                "Compensation failed: orphaned identity %s (%s) needs manual cleanup",
                identity_id,
                email,
                exc_info=True,
            )
            return Return.err(
                Error(
                    ErrorKind.compensation_failure.value,
                    "Membership creation failed and the created identity could not be removed",
                    details={
                        "orphaned_identity_id": str(identity_id),
                        "email": email,
                        "states": [s.value for s in states],
                    },
                )
            )

        self._transition(states, SagaState.compensated_ok, email)
        return Return.err(
            Error(
                ErrorKind.dependency.value,
                "Membership creation failed; the created identity was rolled back",
                details={"states": [s.value for s in states]},
            )
        )

    def _transition(self, states: List[SagaState], state: SagaState, email: str) -> None:
        states.append(state)
        logger.info("Provisioning %s: %s", email, state.value)

    def _generate_temp_credential(self) -> str:
        return self.temp_credential_prefix + secrets.token_urlsafe(16)
