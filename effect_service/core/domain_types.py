"""Domain Types - rich types that replace bare primitives across the codebase.

Invariants:
    - EffectId, SellerId, BuyerId, AppraisalId wrap UUIDs
    - EffectStatus values are the wire/storage values (InStock, OnAuction, Sold)
    - TransitionOutcome distinguishes not-found from precondition-failed

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON and to the status column without custom encoders
"""

from dataclasses import dataclass
from enum import Enum
from typing import NewType
from uuid import UUID


# ─── Identity Types ──────────────────────────────────────────────

EffectId = NewType("EffectId", UUID)
SellerId = NewType("SellerId", UUID)
BuyerId = NewType("BuyerId", UUID)
AppraisalId = NewType("AppraisalId", UUID)


# ─── Enums ───────────────────────────────────────────────────────

class EffectStatus(str, Enum):
    """Effect lifecycle states - maps to DB `status` column."""
    IN_STOCK = "InStock"
    ON_AUCTION = "OnAuction"
    SOLD = "Sold"


class LifecycleOperation(str, Enum):
    """Guarded transitions exposed by the lifecycle service."""
    TRANSFER_TO_AUCTION = "transfer_to_auction"
    MARK_AS_SOLD = "mark_as_sold"


class TransitionOutcome(str, Enum):
    """Typed result of a lifecycle transition."""
    SUCCESS = "success"
    NOT_FOUND = "not_found"
    PRECONDITION_FAILED = "precondition_failed"
    NOT_MODIFIED = "not_modified"


@dataclass(frozen=True)
class TransitionResult:
    """Outcome plus a human-readable reason for the boundary."""
    outcome: TransitionOutcome
    effect_id: EffectId
    reason: str = ""
    current_status: EffectStatus | None = None

    @property
    def succeeded(self) -> bool:
        return self.outcome is TransitionOutcome.SUCCESS
