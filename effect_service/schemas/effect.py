"""Effect Schemas - Pydantic models for the /effect API boundary.

Invariants:
    - Wire names are camelCase (id, minimumPrice, appraisalId, soldFor, ...)
    - Prices are non-negative Decimals that fit the price column (12 digits, 2 places)
    - to_entity()/from_entity() are the only crossings between schema and domain

Design Decisions:
    - Create/update arrive as multipart form fields (an image file may ride along);
      effect_form() is the FastAPI dependency that collects them
    - image is not a form field: the adapter owns the image reference
"""

from datetime import datetime
from decimal import Decimal
from typing import Annotated
from uuid import UUID

from fastapi import Form
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from effect_service.core.domain_types import (
    AppraisalId, BuyerId, EffectId, EffectStatus, SellerId,
)
from effect_service.core.effect import AuctionDraft, Effect

# Matches Numeric(12, 2) on the price columns
PRICE_DIGITS = 12
PRICE_PLACES = 2


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class EffectForm(CamelModel):
    """Create/update payload. Status is honored on update only."""
    id: UUID | None = None
    title: str = Field("", max_length=200)
    description: str = ""
    seller: UUID | None = None
    minimum_price: Decimal = Field(
        Decimal("0"), ge=0, max_digits=PRICE_DIGITS, decimal_places=PRICE_PLACES,
    )
    status: EffectStatus = EffectStatus.IN_STOCK
    appraisal_id: UUID | None = None
    buyer: UUID | None = None
    sold_for: Decimal | None = Field(
        None, ge=0, max_digits=PRICE_DIGITS, decimal_places=PRICE_PLACES,
    )

    def to_entity(self, image: str = "") -> Effect:
        return Effect(
            effect_id=EffectId(self.id) if self.id is not None else None,
            title=self.title,
            description=self.description,
            image=image,
            seller=SellerId(self.seller) if self.seller is not None else None,
            minimum_price=self.minimum_price,
            status=self.status,
            appraisal_id=(
                AppraisalId(self.appraisal_id)
                if self.appraisal_id is not None else None
            ),
            buyer=BuyerId(self.buyer) if self.buyer is not None else None,
            sold_for=self.sold_for,
        )


def effect_form(
    id: Annotated[UUID | None, Form()] = None,
    title: Annotated[str, Form(max_length=200)] = "",
    description: Annotated[str, Form()] = "",
    seller: Annotated[UUID | None, Form()] = None,
    minimum_price: Annotated[Decimal, Form(
        alias="minimumPrice", ge=0,
        max_digits=PRICE_DIGITS, decimal_places=PRICE_PLACES,
    )] = Decimal("0"),
    status: Annotated[EffectStatus, Form()] = EffectStatus.IN_STOCK,
    appraisal_id: Annotated[UUID | None, Form(alias="appraisalId")] = None,
    buyer: Annotated[UUID | None, Form()] = None,
    sold_for: Annotated[Decimal | None, Form(
        alias="soldFor", ge=0,
        max_digits=PRICE_DIGITS, decimal_places=PRICE_PLACES,
    )] = None,
) -> EffectForm:
    """FastAPI dependency: collect the effect fields of a multipart form."""
    return EffectForm(
        id=id, title=title, description=description, seller=seller,
        minimum_price=minimum_price, status=status, appraisal_id=appraisal_id,
        buyer=buyer, sold_for=sold_for,
    )


class EffectResponse(CamelModel):
    """Public effect record."""
    id: UUID
    title: str
    description: str
    image: str
    seller: UUID | None
    minimum_price: Decimal
    status: EffectStatus
    appraisal_id: UUID | None
    buyer: UUID | None
    sold_for: Decimal | None

    @classmethod
    def from_entity(cls, effect: Effect) -> "EffectResponse":
        return cls(
            id=effect.effect_id,
            title=effect.title,
            description=effect.description,
            image=effect.image,
            seller=effect.seller,
            minimum_price=effect.minimum_price,
            status=effect.status,
            appraisal_id=effect.appraisal_id,
            buyer=effect.buyer,
            sold_for=effect.sold_for,
        )


class SaleRequest(CamelModel):
    """Body of POST /effect/{id}/mark-as-sold."""
    buyer_id: UUID
    sold_for: Decimal = Field(
        ge=0, max_digits=PRICE_DIGITS, decimal_places=PRICE_PLACES,
    )


class TransitionResponse(CamelModel):
    """Successful lifecycle transition."""
    id: UUID
    status: EffectStatus
    message: str


class AuctionDraftResponse(CamelModel):
    """Auction fields pre-filled from an in-stock effect."""
    effect_id: UUID
    auction_title: str
    description: str
    image: str
    minimum_price: Decimal
    starting_price: Decimal
    user_id: UUID | None
    appraisal_id: UUID | None
    start_date: datetime
    end_date: datetime

    @classmethod
    def from_draft(cls, draft: AuctionDraft) -> "AuctionDraftResponse":
        return cls(
            effect_id=draft.effect_id,
            auction_title=draft.title,
            description=draft.description,
            image=draft.image,
            minimum_price=draft.minimum_price,
            starting_price=draft.starting_price,
            user_id=draft.user_id,
            appraisal_id=draft.appraisal_id,
            start_date=draft.start_date,
            end_date=draft.end_date,
        )
