"""
Load Context Use Case

Resolves the caller's effective access and returns it with identity details.
"""

from partner_iam.app.services.role_resolver import ResolutionContext, RoleResolver
from partner_iam.app.services.unit_of_work import UnitOfWork
from partner_iam.domain.errors import ErrorKind
from partner_iam.domain.result import Error, Result, Return
from .dtos import AccessInfo, ContextResponse, IdentityInfo, MembershipInfo


class LoadContextUseCase:
    """
    Use case for loading the current caller's context.

    Business Rules:
    - An identity is required
    - Access comes from RoleResolver, overrides included
    - A missing membership is not an error: access is unknown
    """

    def __init__(self, uow: UnitOfWork, resolver: RoleResolver):
        self.uow = uow
        self.resolver = resolver

    async def execute(self, context: ResolutionContext) -> Result[ContextResponse]:
        identity = context.identity
        if identity is None:
            return Return.err(Error(ErrorKind.authentication.value, "Not authenticated"))

        access = await self.resolver.resolve(context)

        async with self.uow:
            membership = await self.uow.memberships.find_by_identity_id(identity.id)
            membership_info = None
            if membership is not None:
                membership_info = MembershipInfo(
                    id=str(membership.id),
                    role=membership.role,
                    tenant_id=membership.tenant_id,
                    disabled=membership.disabled,
                )

        return Return.ok(
            ContextResponse(
                identity=IdentityInfo(
                    id=str(identity.id),
                    email=identity.email,
                    full_name=identity.full_name,
                ),
                access=AccessInfo(role=access.role.value, tenant_id=access.tenant_id),
                membership=membership_info,
            )
        )
