"""Lifecycle Enforcement - the effect state machine as pure rules.

Invariants:
    - TRANSITIONS is the single source of truth for legal status changes
    - SOLD has no outgoing transition
    - check_transition is PURE: returns a rejection message, does NOT touch the store
    - Shell (services/effect_lifecycle.py) applies the write

Design Decisions:
    - Table keyed by operation rather than by status pair: each operation has exactly
      one source and one target state
"""

from effect_service.core.domain_types import EffectStatus, LifecycleOperation


# operation -> (required current status, resulting status)
TRANSITIONS: dict[LifecycleOperation, tuple[EffectStatus, EffectStatus]] = {
    LifecycleOperation.TRANSFER_TO_AUCTION: (
        EffectStatus.IN_STOCK, EffectStatus.ON_AUCTION,
    ),
    LifecycleOperation.MARK_AS_SOLD: (
        EffectStatus.ON_AUCTION, EffectStatus.SOLD,
    ),
}

_REJECTION_MESSAGES: dict[LifecycleOperation, str] = {
    LifecycleOperation.TRANSFER_TO_AUCTION: (
        "Effect must be in stock to transfer to auction"
    ),
    LifecycleOperation.MARK_AS_SOLD: (
        "Effect must be on auction to be marked as sold"
    ),
}


def required_status(operation: LifecycleOperation) -> EffectStatus:
    return TRANSITIONS[operation][0]


def target_status(operation: LifecycleOperation) -> EffectStatus:
    return TRANSITIONS[operation][1]


def check_transition(
    current: EffectStatus, operation: LifecycleOperation,
) -> str | None:
    """Return a rejection reason if `operation` is illegal from `current`, else None."""
    if current is required_status(operation):
        return None
    return (
        f"{_REJECTION_MESSAGES[operation]} "
        f"(current status: {current.value})"
    )

