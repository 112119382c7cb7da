"""Effect Query Service - read-only projections consumed by collaborators.

Invariants:
    - Never writes
    - Plain lookups delegate to the store without transformation
    - get_auction_draft only drafts from an IN_STOCK effect
"""

from datetime import datetime

from effect_service.core.domain_types import (
    EffectId, EffectStatus, LifecycleOperation, SellerId,
)
from effect_service.core.effect import AuctionDraft, Effect, build_auction_draft
from effect_service.core.enforce_lifecycle import check_transition
from effect_service.core.errors import ErrorContext, PreconditionFailedError
from effect_service.core.repository_protocols import EffectStore


class EffectQueryService:
    """Contract surface for dashboards and the auction-creation workflow."""

    def __init__(self, store: EffectStore):
        self.store = store

    async def get_all_effects(self) -> list[Effect]:
        return await self.store.get_all()

    async def get_effect(self, effect_id: EffectId) -> Effect | None:
        return await self.store.get(effect_id)

    async def effect_exists(self, effect_id: EffectId) -> bool:
        return await self.store.exists(effect_id)

    async def get_effects_by_status(self, status: EffectStatus) -> list[Effect]:
        return await self.store.find_by_status(status)

    async def get_effects_by_seller(self, seller_id: SellerId) -> list[Effect]:
        return await self.store.find_by_seller(seller_id)

    async def get_auction_draft(
        self, effect_id: EffectId, now: datetime,
    ) -> AuctionDraft | None:
        """Auction pre-fill for an effect that can still be transferred to auction."""
        effect = await self.store.get(effect_id)
        if effect is None:
            return None
        reason = check_transition(
            effect.status, LifecycleOperation.TRANSFER_TO_AUCTION,
        )
        if reason:
            raise PreconditionFailedError(
                reason,
                ErrorContext(
                    effect_id=str(effect_id),
                    operation="auction_draft",
                    current_status=effect.status.value,
                ),
            )
        return build_auction_draft(effect, now)
