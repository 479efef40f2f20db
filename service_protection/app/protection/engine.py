"""
Protection evaluation engine.

Decides whether an operation on a resource is restricted for the acting
user. The units governing the resource are merged with a "least
restrictive wins" strategy: the operation is protected only when every
unit protects it. A protected operation is still allowed for members of
at least one governing unit.
"""

import time
from typing import Any, Awaitable, Iterable, Mapping, Optional, Sequence, Tuple

from shared.config import ProtectionConfig, get_cached_config
from shared.errors import ErrorCodes, ForbiddenError, ValidationError
from shared.logging import get_logger
from shared.metrics import MetricsCollector, get_metrics_collector
from shared.tracing import trace_operation

from .contracts import MembershipLookup, UnitAssignmentLookup, UnitLookup
from .models import (
    EvaluationRequest, IdentityContext, OperationType,
    ResourceEvaluationRequest, Unit, UnitIdsEvaluationRequest
)


class ProtectionEngine:
    """Evaluates unit-based operation protection.

    The engine keeps no per-request state; one instance can serve
    concurrent evaluations.
    """

    def __init__(self, assignments: UnitAssignmentLookup, units: UnitLookup,
                 memberships: MembershipLookup, metrics: Optional[MetricsCollector] = None,
                 config: Optional[ProtectionConfig] = None):
        self.logger = get_logger("protection.engine")
        self.assignments = assignments
        self.units = units
        self.memberships = memberships
        self.metrics = metrics or get_metrics_collector("protection")
        self.config = config or get_cached_config()

    def identity_from_headers(self, headers: Optional[Mapping[str, str]]) -> IdentityContext:
        """Resolve the acting user from request headers using this engine's configuration."""
        return IdentityContext.from_headers(headers, self.config)

    async def evaluate(self, request: EvaluationRequest) -> bool:
        """Evaluate either request variant."""
        if isinstance(request, ResourceEvaluationRequest):
            return await self.evaluate_by_resource(request.resource_id, request.operation, request.identity)
        if isinstance(request, UnitIdsEvaluationRequest):
            return await self.evaluate_by_unit_ids(request.unit_ids, request.operation, request.identity)
        raise TypeError(f"Unsupported evaluation request: {type(request).__name__}")

    async def verify_operation_allowed(self, request: EvaluationRequest) -> None:
        """Raise ``ForbiddenError(USER_HAS_NO_PERMISSIONS)`` if the operation is restricted."""
        if await self.evaluate(request):
            raise ForbiddenError(
                ErrorCodes.USER_HAS_NO_PERMISSIONS,
                details={"operation": request.operation.value}
            )

    async def evaluate_by_resource(self, resource_id: str, operation: OperationType,
                                   identity: IdentityContext) -> bool:
        """Determine restriction status from the units assigned to a resource.

        Returns True if the operation is restricted, otherwise False.
        """
        user_id = self._require_user(identity, operation)
        logger = self._bind_logger(identity, operation, resource_id=resource_id)

        async def pipeline() -> bool:
            unit_ids = await self._get_unit_ids_assigned_to_resource(resource_id, logger)
            return await self._is_operation_restricted(user_id, unit_ids, operation, logger)

        return await self._observe(operation, logger, pipeline(), resource_id=resource_id)

    async def evaluate_by_unit_ids(self, unit_ids: Iterable[str], operation: OperationType,
                                   identity: IdentityContext) -> bool:
        """Determine restriction status from an already known set of unit IDs.

        Returns True if the operation is restricted, otherwise False.
        """
        user_id = self._require_user(identity, operation)
        unit_ids = self._normalize_unit_ids(unit_ids)
        logger = self._bind_logger(identity, operation, unit_ids=list(unit_ids))

        return await self._observe(
            operation, logger,
            self._is_operation_restricted(user_id, unit_ids, operation, logger),
            unit_count=len(unit_ids)
        )

    @staticmethod
    def apply_merging_strategy(units: Sequence[Unit], operation: OperationType) -> bool:
        """Return True if every unit protects the operation (least restrictive wins)."""
        return all(operation.is_protected(unit) for unit in units)

    async def _is_operation_restricted(self, user_id: str, unit_ids: Tuple[str, ...],
                                       operation: OperationType, logger: Any) -> bool:
        if not unit_ids:
            logger.debug("No units assigned, operation is not restricted")
            return False

        units = await self._get_units_by_ids(unit_ids, logger)
        self._ensure_units_complete(unit_ids, units, logger)

        if not self.apply_merging_strategy(units, operation):
            logger.debug("Operation is not protected by all units")
            return False

        member_unit_ids = await self._get_unit_ids_assigned_to_user(user_id, unit_ids, logger)
        if member_unit_ids:
            logger.debug("User is a member of a governing unit", member_unit_ids=sorted(member_unit_ids))
            return False
        return True

    async def _get_unit_ids_assigned_to_resource(self, resource_id: str, logger: Any) -> Tuple[str, ...]:
        logger.debug("Looking up unit assignments")
        self.metrics.record_lookup("assignments")
        return self._normalize_unit_ids(await self.assignments.lookup_assigned_units(resource_id))

    async def _get_units_by_ids(self, unit_ids: Tuple[str, ...], logger: Any) -> Sequence[Unit]:
        logger.debug("Looking up units", unit_count=len(unit_ids))
        self.metrics.record_lookup("units")
        return list(await self.units.lookup_units(unit_ids))

    async def _get_unit_ids_assigned_to_user(self, user_id: str, unit_ids: Tuple[str, ...],
                                             logger: Any) -> set:
        logger.debug("Looking up unit memberships")
        self.metrics.record_lookup("memberships")
        return set(await self.memberships.lookup_memberships(user_id, unit_ids))

    def _ensure_units_complete(self, unit_ids: Tuple[str, ...], units: Sequence[Unit], logger: Any) -> None:
        returned_ids = {unit.id for unit in units}
        missing = [unit_id for unit_id in unit_ids if unit_id not in returned_ids]
        if missing or len(units) != len(unit_ids):
            logger.warning(
                "Units assigned to resource cannot be found",
                requested=len(unit_ids),
                returned=len(units),
                missing=missing
            )
            raise ValidationError(
                ErrorCodes.ORDER_UNITS_NOT_FOUND,
                details={"unit_ids": list(unit_ids), "missing": missing}
            )

    async def _observe(self, operation: OperationType, logger: Any, pipeline: Awaitable[bool],
                       **attributes) -> bool:
        start_time = time.time()
        outcome = "error"
        try:
            with trace_operation("protection.evaluate", operation=operation.value, **attributes):
                restricted = await pipeline
            outcome = "restricted" if restricted else "unrestricted"
            logger.info("Protection evaluated", restricted=restricted)
            return restricted
        finally:
            self.metrics.record_evaluation(operation.value, outcome, time.time() - start_time)

    def _require_user(self, identity: IdentityContext, operation: OperationType) -> str:
        try:
            return identity.require_user_id()
        except ForbiddenError:
            self.logger.warning("Unknown user", operation=operation.value, tenant_id=identity.tenant_id)
            raise

    def _bind_logger(self, identity: IdentityContext, operation: OperationType, **context):
        return self.logger.bind(
            user_id=identity.user_id,
            tenant_id=identity.tenant_id,
            request_id=identity.request_id,
            operation=operation.value,
            **context
        )

    @staticmethod
    def _normalize_unit_ids(unit_ids: Optional[Iterable[str]]) -> Tuple[str, ...]:
        # De-duplicate while keeping order; the same tuple drives every later lookup
        return tuple(dict.fromkeys(unit_ids or ()))
