"""
Tenant Filter Guard

Every query on a tenant-scoped table passes through scope() and validate()
before it touches storage. Missing tenant context means zero rows, never all
rows.
"""

import logging
from typing import Iterable, Iterator, Optional

from sqlalchemy import Select, false
from sqlalchemy.sql import operators
from sqlalchemy.sql.elements import (
    BinaryExpression,
    BindParameter,
    BooleanClauseList,
    ClauseElement,
    False_,
    Grouping,
    True_,
    UnaryExpression,
)

from partner_iam.domain.access import ResolvedAccess
from partner_iam.domain.entities import AccessRole
from partner_iam.domain.errors import TenantIsolationError

logger = logging.getLogger(__name__)

DEFAULT_TENANT_SCOPED_RESOURCES = frozenset({"deliverables", "activity_log"})


class TenantFilterGuard:
    def __init__(
        self,
        scoped_resources: Iterable[str] = DEFAULT_TENANT_SCOPED_RESOURCES,
        tenant_column: str = "tenant_id",
    ):
        self.scoped_resources = frozenset(scoped_resources)
        self.tenant_column = tenant_column

    def scope(self, query: Select, access: ResolvedAccess, model=None) -> Select:
        """
        Restrict a query to what the caller may see.

        - superadmin / admin: unchanged
        - partner with tenant: tenant_id equality added
        - partner without tenant, unknown: zero-row constraint
        """
        if access.is_admin:
            return query

        if access.role == AccessRole.partner:
            if access.tenant_id is not None:
                column = self._tenant_column_of(query, model)
                return query.where(column == access.tenant_id)
            logger.warning(
                "Partner access without tenant on %s, denying all rows",
                self._resource_name(query),
            )

        return query.where(false())

    def validate(self, query: Select, access: ResolvedAccess) -> None:
        """
        Block a query on a tenant-scoped resource that lacks isolation.

        Raises:
            TenantIsolationError: non-admin caller and neither the caller's
                tenant equality nor a zero-row constraint is present
        """
        resource = self._resource_name(query)
        if resource not in self.scoped_resources or access.is_admin:
            return

        conjuncts = list(self._conjuncts(query.whereclause))
        if any(self._is_zero_row(c) for c in conjuncts):
            return

        if access.role == AccessRole.partner and access.tenant_id is not None:
            if any(self._is_tenant_equality(c, resource, access.tenant_id) for c in conjuncts):
                return

        logger.error(
            "Tenant isolation violation on %s (role=%s, tenant_id=%s)",
            resource,
            access.role.value,
            access.tenant_id,
        )
        raise TenantIsolationError(resource, access.role.value, access.tenant_id)

    def apply(self, query: Select, access: ResolvedAccess, model=None) -> Select:
        """scope() then validate(); what repositories call"""
        scoped = self.scope(query, access, model)
        self.validate(scoped, access)
        return scoped

    def _entity(self, query: Select):
        for description in query.column_descriptions:
            entity = description.get("entity")
            if entity is not None:
                return entity
        return None

    def _resource_name(self, query: Select) -> Optional[str]:
        entity = self._entity(query)
        if entity is not None and hasattr(entity, "__tablename__"):
            return entity.__tablename__
        for from_clause in query.get_final_froms():
            name = getattr(from_clause, "name", None)
            if name:
                return name
        return None

    def _tenant_column_of(self, query: Select, model):
        model = model if model is not None else self._entity(query)
        column = getattr(model, self.tenant_column, None) if model is not None else None
        if column is None:
            raise ValueError(f"Cannot tenant-scope {model!r}: no '{self.tenant_column}' column")
        return column

    def _conjuncts(self, clause: Optional[ClauseElement]) -> Iterator[ClauseElement]:
        """Top-level AND terms of a WHERE clause"""
        if clause is None:
            return
        if isinstance(clause, Grouping):
            yield from self._conjuncts(clause.element)
        elif isinstance(clause, BooleanClauseList) and clause.operator is operators.and_:
            for inner in clause.clauses:
                yield from self._conjuncts(inner)
        else:
            yield clause

    def _is_zero_row(self, clause: ClauseElement) -> bool:
        """
        A constant-false term, however the SQLAlchemy version wraps it
        (Grouping, NOT, or an AsBoolean around false()/true()).
        """
        negated = False
        while True:
            if isinstance(clause, Grouping):
                clause = clause.element
            elif isinstance(clause, UnaryExpression) and clause.modifier is None:
                if clause.operator in (operators.inv, operators.is_false):
                    negated = not negated
                elif clause.operator is not operators.is_true:
                    return False
                clause = clause.element
            else:
                break
        return isinstance(clause, True_ if negated else False_)

    def _is_tenant_equality(self, clause: ClauseElement, resource: str, tenant_id: str) -> bool:
        if not isinstance(clause, BinaryExpression) or clause.operator is not operators.eq:
            return False
        column, value = clause.left, clause.right
        if isinstance(column, BindParameter):
            column, value = value, column
        if getattr(column, "key", None) != self.tenant_column:
            return False
        table = getattr(column, "table", None)
        if getattr(table, "name", None) != resource:
            return False
        return isinstance(value, BindParameter) and value.value == tenant_id
