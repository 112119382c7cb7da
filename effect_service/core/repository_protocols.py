"""Boundary Protocols - contract between the lifecycle core and the persistence shell.

Invariants:
    - Services depend on EffectStore only, never on the SQLAlchemy implementation
    - Every method is independently atomic at the single-record level
    - Queries never raise for "no data": absent is None, empty is []

Design Decisions:
    - Protocol over ABC: structural subtyping, test fakes need no inheritance
    - Async in Protocol: implementations do IO
"""

from typing import Protocol

from effect_service.core.domain_types import EffectId, EffectStatus, SellerId
from effect_service.core.effect import Effect


class EffectStore(Protocol):
    """Contract for effect persistence - implemented by infrastructure/effect_store.py."""
    async def get_all(self) -> list[Effect]: ...
    async def get(self, effect_id: EffectId) -> Effect | None: ...
    async def exists(self, effect_id: EffectId) -> bool: ...
    async def create(self, effect: Effect) -> EffectId | None: ...
    async def update(self, effect: Effect) -> bool: ...
    async def conditional_update(
        self,
        effect_id: EffectId,
        expected_status: EffectStatus,
        **fields: object,
    ) -> bool: ...
    async def delete(self, effect_id: EffectId) -> bool: ...
    async def find_by_status(self, status: EffectStatus) -> list[Effect]: ...
    async def find_by_seller(self, seller_id: SellerId) -> list[Effect]: ...
