"""Effect Entity - the value object at the centre of the lifecycle, plus pure helpers.

Invariants:
    - effect_id is assigned once (normalize_for_create) and never replaced
    - status == SOLD <=> buyer and sold_for are both set (check_sold_invariant)
    - normalize_for_create always yields status IN_STOCK with no sale fields
    - build_auction_draft is PURE: caller supplies `now`

Design Decisions:
    - Frozen dataclass with dataclasses.replace for changes: no accidental mutation
      of records read from the store
    - Seller/appraisal ids nullable: intake may happen before either is known
"""

import uuid
from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from decimal import Decimal

from effect_service.core.domain_types import (
    AppraisalId, BuyerId, EffectId, EffectStatus, SellerId,
)

AUCTION_START_DELAY = timedelta(days=1)
AUCTION_DURATION = timedelta(days=7)


@dataclass(frozen=True)
class Effect:
    """A sellable item under appraisal, on auction, or sold."""
    effect_id: EffectId | None = None
    title: str = ""
    description: str = ""
    image: str = ""
    seller: SellerId | None = None
    minimum_price: Decimal = Decimal("0")
    status: EffectStatus = EffectStatus.IN_STOCK
    appraisal_id: AppraisalId | None = None
    buyer: BuyerId | None = None
    sold_for: Decimal | None = None


@dataclass(frozen=True)
class AuctionDraft:
    """Auction fields pre-filled from an effect for the auction workflow."""
    effect_id: EffectId
    title: str
    description: str
    image: str
    minimum_price: Decimal
    starting_price: Decimal
    user_id: SellerId | None
    appraisal_id: AppraisalId | None
    start_date: datetime
    end_date: datetime


def normalize_for_create(effect: Effect) -> Effect:
    """Assign an id when absent, force IN_STOCK and drop any sale fields."""
    return replace(
        effect,
        effect_id=(
            effect.effect_id if effect.effect_id is not None
            else EffectId(uuid.uuid4())
        ),
        status=EffectStatus.IN_STOCK,
        buyer=None,
        sold_for=None,
    )


def check_sold_invariant(effect: Effect) -> str | None:
    """Return a violation message, or None if status and sale fields agree."""
    has_sale = effect.buyer is not None and effect.sold_for is not None
    has_any_sale_field = effect.buyer is not None or effect.sold_for is not None
    if effect.status is EffectStatus.SOLD and not has_sale:
        return "A sold effect requires both buyer and soldFor"
    if effect.status is not EffectStatus.SOLD and has_any_sale_field:
        return (
            f"buyer and soldFor must be empty unless status is "
            f"{EffectStatus.SOLD.value} (got {effect.status.value})"
        )
    return None


def build_auction_draft(effect: Effect, now: datetime) -> AuctionDraft:
    """Pre-fill an auction from an effect. Starting price equals the minimum price."""
    start = now + AUCTION_START_DELAY
    return AuctionDraft(
        effect_id=effect.effect_id,
        title=effect.title,
        description=effect.description,
        image=effect.image,
        minimum_price=effect.minimum_price,
        starting_price=effect.minimum_price,
        user_id=effect.seller,
        appraisal_id=effect.appraisal_id,
        start_date=start,
        end_date=start + AUCTION_DURATION,
    )
