"""Effect Lifecycle Service - create/update/delete and the guarded status transitions.

Invariants:
    - create_effect always stores status IN_STOCK with an id (caller's or generated)
    - Transitions issue exactly one conditional update: WHERE id = X AND status = required
    - A transition never applies against a stale status
    - Outcomes are returned as TransitionResult, never raised
    - Zero rows modified is disambiguated by one re-read: NOT_FOUND, PRECONDITION_FAILED
      or NOT_MODIFIED
    - No cached records across calls

Design Decisions:
    - Conditional write first, read only on the failure path: the happy path is one
      round trip and cannot race
    - update_effect is the administrative escape hatch: bypasses the state machine but
      still refuses a record that breaks the Sold invariant, and logs at WARNING
    - The zero-modify re-read trusts the store: under storage_failure_mode "degrade" a
      failed re-read is indistinguishable from a missing record and reports NOT_FOUND;
      "raise" mode surfaces the DatabaseError instead
"""

import logging
from decimal import Decimal

from effect_service.core.domain_types import (
    BuyerId, EffectId, LifecycleOperation, TransitionOutcome, TransitionResult,
)
from effect_service.core.effect import (
    Effect, check_sold_invariant, normalize_for_create,
)
from effect_service.core.enforce_lifecycle import (
    check_transition, required_status, target_status,
)
from effect_service.core.errors import EffectValidationError, ErrorContext
from effect_service.core.repository_protocols import EffectStore

logger = logging.getLogger(__name__)


class EffectLifecycleService:
    """Enforces the InStock -> OnAuction -> Sold state machine over an EffectStore."""

    def __init__(self, store: EffectStore):
        self.store = store

    async def create_effect(self, effect: Effect) -> Effect | None:
        """Normalize and insert. Returns the stored record, or None if the store refused it."""
        normalized = normalize_for_create(effect)
        created_id = await self.store.create(normalized)
        if created_id is None:
            return None
        return normalized

    def validate_update(self, effect: Effect) -> None:
        """Raise EffectValidationError if `effect` breaks the Sold invariant."""
        violation = check_sold_invariant(effect)
        if violation:
            raise EffectValidationError(
                violation, "status",
                ErrorContext(effect_id=str(effect.effect_id), operation="update"),
            )

    async def update_effect(self, effect: Effect) -> bool:
        """Full-record replace, bypassing the state machine."""
        self.validate_update(effect)
        logger.warning(
            f"Full update of effect {effect.effect_id} "
            f"(status set to {effect.status.value}, state machine bypassed)",
            extra={
                "effect_id": str(effect.effect_id),
                "operation": "update",
                "status": effect.status.value,
            },
        )
        return await self.store.update(effect)

    async def delete_effect(self, effect_id: EffectId) -> bool:
        return await self.store.delete(effect_id)

    async def transfer_to_auction(self, effect_id: EffectId) -> TransitionResult:
        """InStock -> OnAuction."""
        return await self._transition(
            effect_id, LifecycleOperation.TRANSFER_TO_AUCTION,
        )

    async def mark_as_sold(
        self, effect_id: EffectId, buyer_id: BuyerId, sold_for: Decimal,
    ) -> TransitionResult:
        """OnAuction -> Sold, recording buyer and sale price."""
        return await self._transition(
            effect_id, LifecycleOperation.MARK_AS_SOLD,
            buyer=buyer_id, sold_for=sold_for,
        )

    async def _transition(
        self,
        effect_id: EffectId,
        operation: LifecycleOperation,
        **fields: object,
    ) -> TransitionResult:
        applied = await self.store.conditional_update(
            effect_id, required_status(operation),
            status=target_status(operation), **fields,
        )
        if applied:
            logger.info(
                f"{operation.value}: effect {effect_id} is now "
                f"{target_status(operation).value}",
                extra={
                    "effect_id": str(effect_id),
                    "operation": operation.value,
                    "status": target_status(operation).value,
                },
            )
            return TransitionResult(
                TransitionOutcome.SUCCESS, effect_id,
                current_status=target_status(operation),
            )
        return await self._explain_rejection(effect_id, operation)

    async def _explain_rejection(
        self, effect_id: EffectId, operation: LifecycleOperation,
    ) -> TransitionResult:
        """Classify a conditional update that modified nothing. Store errors propagate."""
        current = await self.store.get(effect_id)
        if current is None:
            logger.info(
                f"{operation.value}: effect {effect_id} not found",
                extra={"effect_id": str(effect_id), "operation": operation.value},
            )
            return TransitionResult(
                TransitionOutcome.NOT_FOUND, effect_id,
                reason=f"Effect '{effect_id}' not found",
            )

        reason = check_transition(current.status, operation)
        if reason:
            logger.info(
                f"{operation.value} rejected for effect {effect_id}: {reason}",
                extra={
                    "effect_id": str(effect_id),
                    "operation": operation.value,
                    "status": current.status.value,
                },
            )
            return TransitionResult(
                TransitionOutcome.PRECONDITION_FAILED, effect_id,
                reason=reason, current_status=current.status,
            )

        logger.error(
            f"{operation.value}: store reported no modification for effect {effect_id}",
            extra={
                "effect_id": str(effect_id),
                "operation": operation.value,
                "error_code": "TRANSITION_NOT_APPLIED",
            },
        )
        return TransitionResult(
            TransitionOutcome.NOT_MODIFIED, effect_id,
            reason=f"Failed to apply {operation.value} to effect",
            current_status=current.status,
        )
