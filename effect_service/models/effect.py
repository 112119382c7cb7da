"""Effect ORM - durable representation of an Effect, keyed uniquely by id.

Invariants:
    - id is the UUID primary key, supplied by the caller (never server-generated)
    - status stored as the EffectStatus value string
    - buyer and sold_for are NULL unless status == "Sold"
    - to_entity() and column_values() are the only crossings between ORM and domain

Design Decisions:
    - Generic Uuid type: native UUID on PostgreSQL, CHAR(32) on SQLite test databases
    - Numeric(12, 2) for prices: Decimal round-trips without float drift on PostgreSQL
    - Indexes on status and seller: the two equality filters of the query surface
"""

import uuid
from decimal import Decimal

from sqlalchemy import CheckConstraint, Numeric, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from effect_service.core.domain_types import (
    AppraisalId, BuyerId, EffectId, EffectStatus, SellerId,
)
from effect_service.core.effect import Effect
from effect_service.db.base import Base


class EffectRecord(Base):
    """Persisted effect row."""
    __tablename__ = "effects"
    __table_args__ = (
        CheckConstraint(
            "status IN ('InStock', 'OnAuction', 'Sold')",
            name="ck_effects_status",
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True)
    title: Mapped[str] = mapped_column(String(200), nullable=False, default="")
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    image: Mapped[str] = mapped_column(String(500), nullable=False, default="")
    seller: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, nullable=True, index=True,
    )
    minimum_price: Mapped[Decimal] = mapped_column(
        Numeric(12, 2), nullable=False, default=Decimal("0"),
    )
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=EffectStatus.IN_STOCK.value,
        index=True,
    )
    appraisal_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, nullable=True)
    buyer: Mapped[uuid.UUID | None] = mapped_column(Uuid, nullable=True)
    sold_for: Mapped[Decimal | None] = mapped_column(
        Numeric(12, 2), nullable=True,
    )

    def to_entity(self) -> Effect:
        return Effect(
            effect_id=EffectId(self.id),
            title=self.title,
            description=self.description,
            image=self.image,
            seller=SellerId(self.seller) if self.seller is not None else None,
            minimum_price=self.minimum_price,
            status=EffectStatus(self.status),
            appraisal_id=(
                AppraisalId(self.appraisal_id) if self.appraisal_id is not None else None
            ),
            buyer=BuyerId(self.buyer) if self.buyer is not None else None,
            sold_for=self.sold_for,
        )


def column_values(effect: Effect) -> dict:
    """All non-key columns of `effect`, as stored."""
    return {
        "title": effect.title,
        "description": effect.description,
        "image": effect.image,
        "seller": effect.seller,
        "minimum_price": effect.minimum_price,
        "status": effect.status.value,
        "appraisal_id": effect.appraisal_id,
        "buyer": effect.buyer,
        "sold_for": effect.sold_for,
    }
