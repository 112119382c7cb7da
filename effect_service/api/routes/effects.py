"""Effect Routes - boundary adapter between HTTP and the lifecycle/query services.

Invariants:
    - Routes hold no business rules: transitions are decided by EffectLifecycleService
    - Create generates an id when the form omits one and forces status InStock
    - Outcomes map to: not found -> 404, precondition failed -> 400 with reason,
      store reported no modification -> 500, success -> 200/201/204
    - The image side-artifact is written before the record on create (removed again if
      the create fails) and removed after the record on delete

Design Decisions:
    - Domain errors are raised and rendered by the global EffectServiceError handler
    - Update validates the record before touching image files and removes the old
      image only once the new record is stored
"""

import logging
from dataclasses import replace
from datetime import datetime, timezone
from uuid import UUID

from fastapi import APIRouter, Depends, File, Request, Response, UploadFile, status

from effect_service.api.dependencies import (
    get_image_store, get_lifecycle_service, get_query_service,
)
from effect_service.core.domain_types import (
    BuyerId, EffectId, EffectStatus, SellerId, TransitionOutcome, TransitionResult,
)
from effect_service.core.effect import Effect, normalize_for_create
from effect_service.core.errors import (
    DatabaseError, DuplicateEffectError, EffectServiceError, EffectValidationError,
    ErrorContext, PreconditionFailedError, ResourceNotFoundError,
    TransitionNotAppliedError,
)
from effect_service.infrastructure.image_store import LocalImageStore
from effect_service.schemas.effect import (
    AuctionDraftResponse, EffectForm, EffectResponse, SaleRequest,
    TransitionResponse, effect_form,
)
from effect_service.services.effect_lifecycle import EffectLifecycleService
from effect_service.services.effect_queries import EffectQueryService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/effect", tags=["effects"])


async def get_effect_or_404(
    effect_id: EffectId, queries: EffectQueryService,
) -> Effect:
    effect = await queries.get_effect(effect_id)
    if effect is None:
        raise ResourceNotFoundError(
            "Effect", str(effect_id),
            ErrorContext(effect_id=str(effect_id)),
        )
    return effect


async def _read_upload(image: UploadFile | None) -> bytes | None:
    if image is None or not image.filename:
        return None
    content = await image.read()
    return content or None


# ─── Queries ─────────────────────────────────────────────────────

@router.get("", response_model=list[EffectResponse])
async def get_all_effects(
    queries: EffectQueryService = Depends(get_query_service),
):
    """List every effect (administrative view)."""
    logger.info("Getting all effects", extra={"operation": "get_all"})
    return [EffectResponse.from_entity(e) for e in await queries.get_all_effects()]


@router.get("/status/{effect_status}", response_model=list[EffectResponse])
async def get_effects_by_status(
    effect_status: EffectStatus,
    queries: EffectQueryService = Depends(get_query_service),
):
    """List effects currently in `effect_status`."""
    effects = await queries.get_effects_by_status(effect_status)
    return [EffectResponse.from_entity(e) for e in effects]


@router.get("/seller/{seller_id}", response_model=list[EffectResponse])
async def get_effects_by_seller(
    seller_id: UUID,
    queries: EffectQueryService = Depends(get_query_service),
):
    """List effects consigned by one seller."""
    effects = await queries.get_effects_by_seller(SellerId(seller_id))
    return [EffectResponse.from_entity(e) for e in effects]


@router.get("/{effect_id}", response_model=EffectResponse, name="get_effect")
async def get_effect(
    effect_id: UUID,
    queries: EffectQueryService = Depends(get_query_service),
):
    effect = await get_effect_or_404(EffectId(effect_id), queries)
    return EffectResponse.from_entity(effect)


@router.get("/{effect_id}/auction-draft", response_model=AuctionDraftResponse)
async def get_auction_draft(
    effect_id: UUID,
    queries: EffectQueryService = Depends(get_query_service),
):
    """Auction fields pre-filled from an in-stock effect."""
    draft = await queries.get_auction_draft(
        EffectId(effect_id), datetime.now(timezone.utc),
    )
    if draft is None:
        raise ResourceNotFoundError("Effect", str(effect_id))
    return AuctionDraftResponse.from_draft(draft)


# ─── CRUD ────────────────────────────────────────────────────────

@router.post(
    "", response_model=EffectResponse, status_code=status.HTTP_201_CREATED,
)
async def create_effect(
    request: Request,
    response: Response,
    form: EffectForm = Depends(effect_form),
    image: UploadFile | None = File(None),
    lifecycle: EffectLifecycleService = Depends(get_lifecycle_service),
    queries: EffectQueryService = Depends(get_query_service),
    images: LocalImageStore = Depends(get_image_store),
):
    """Create an effect in stock, optionally with an image."""
    effect = normalize_for_create(form.to_entity())
    ctx = ErrorContext(effect_id=str(effect.effect_id), operation="create")
    if form.id is not None and await queries.effect_exists(effect.effect_id):
        raise DuplicateEffectError(str(effect.effect_id), ctx)

    content = await _read_upload(image)
    if content is not None:
        effect = replace(
            effect, image=images.save(effect.effect_id, image.filename, content),
        )

    try:
        created = await lifecycle.create_effect(effect)
    except EffectServiceError:
        images.remove(effect.image)
        raise
    if created is None:
        images.remove(effect.image)
        if await queries.effect_exists(effect.effect_id):
            raise DuplicateEffectError(str(effect.effect_id), ctx)
        raise DatabaseError("Effect could not be created", "create", ctx)

    response.headers["Location"] = str(
        request.url_for("get_effect", effect_id=str(created.effect_id)),
    )
    return EffectResponse.from_entity(created)


@router.put("/{effect_id}", status_code=status.HTTP_204_NO_CONTENT)
async def update_effect(
    effect_id: UUID,
    form: EffectForm = Depends(effect_form),
    image: UploadFile | None = File(None),
    lifecycle: EffectLifecycleService = Depends(get_lifecycle_service),
    queries: EffectQueryService = Depends(get_query_service),
    images: LocalImageStore = Depends(get_image_store),
):
    """Replace every field of an effect. Keeps the stored image unless a new one is sent."""
    if form.id != effect_id:
        raise EffectValidationError(
            "Path id does not match body id", "id",
            ErrorContext(effect_id=str(effect_id), operation="update"),
        )
    existing = await get_effect_or_404(EffectId(effect_id), queries)
    effect = form.to_entity(image=existing.image)
    lifecycle.validate_update(effect)

    content = await _read_upload(image)
    if content is not None:
        effect = replace(
            effect, image=images.save(effect.effect_id, image.filename, content),
        )

    if not await lifecycle.update_effect(effect):
        if not await queries.effect_exists(effect.effect_id):
            images.remove(effect.image)
            raise ResourceNotFoundError(
                "Effect", str(effect_id),
                ErrorContext(effect_id=str(effect_id), operation="update"),
            )
    if existing.image and existing.image != effect.image:
        images.remove(existing.image)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/{effect_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_effect(
    effect_id: UUID,
    lifecycle: EffectLifecycleService = Depends(get_lifecycle_service),
    queries: EffectQueryService = Depends(get_query_service),
    images: LocalImageStore = Depends(get_image_store),
):
    """Hard delete, removing the stored image as well."""
    existing = await get_effect_or_404(EffectId(effect_id), queries)
    if not await lifecycle.delete_effect(existing.effect_id):
        raise ResourceNotFoundError("Effect", str(effect_id))
    images.remove(existing.image)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ─── Lifecycle transitions ───────────────────────────────────────

@router.post("/{effect_id}/transfer-to-auction", response_model=TransitionResponse)
async def transfer_to_auction(
    effect_id: UUID,
    lifecycle: EffectLifecycleService = Depends(get_lifecycle_service),
):
    """InStock -> OnAuction. Called by the auction workflow after it created the auction."""
    result = await lifecycle.transfer_to_auction(EffectId(effect_id))
    _raise_for_outcome(result, "transfer_to_auction")
    return TransitionResponse(
        id=effect_id, status=result.current_status,
        message="Effect successfully transferred to auction",
    )


@router.post("/{effect_id}/mark-as-sold", response_model=TransitionResponse)
async def mark_as_sold(
    effect_id: UUID,
    body: SaleRequest,
    lifecycle: EffectLifecycleService = Depends(get_lifecycle_service),
):
    """OnAuction -> Sold with buyer and sale price."""
    result = await lifecycle.mark_as_sold(
        EffectId(effect_id), BuyerId(body.buyer_id), body.sold_for,
    )
    _raise_for_outcome(result, "mark_as_sold")
    return TransitionResponse(
        id=effect_id, status=result.current_status,
        message="Effect successfully marked as sold",
    )


def _raise_for_outcome(result: TransitionResult, operation: str) -> None:
    ctx = ErrorContext(
        effect_id=str(result.effect_id),
        operation=operation,
        current_status=(
            result.current_status.value if result.current_status else None
        ),
    )
    if result.outcome is TransitionOutcome.NOT_FOUND:
        raise ResourceNotFoundError("Effect", str(result.effect_id), ctx)
    if result.outcome is TransitionOutcome.PRECONDITION_FAILED:
        raise PreconditionFailedError(result.reason, ctx)
    if result.outcome is TransitionOutcome.NOT_MODIFIED:
        raise TransitionNotAppliedError(result.reason, ctx)
