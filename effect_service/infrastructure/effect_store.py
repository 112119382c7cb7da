"""Effect Store - SQLAlchemy implementation of the EffectStore protocol.

Invariants:
    - One statement + commit per call: atomic at the single-record level, no multi-record transactions
    - No business rules: status normalization and transition checks live in the services
    - Writes are Core-style UPDATE/INSERT/DELETE; rowcount is the "modified" signal
    - Reads use populate_existing so a session never serves a stale identity-map row
    - Storage failures are logged and, in "degrade" mode, converted to [] / None / False;
      in "raise" mode they surface as DatabaseError

Design Decisions:
    - update() only matches when some column differs (IS DISTINCT FROM), so an identical
      replace reports False like a document store's modified count
    - create() reports duplicate ids as None in both modes: a duplicate is a caller
      outcome, not a storage failure
"""

import logging
from typing import Literal

from sqlalchemy import delete, insert, or_, select, update
from sqlalchemy.exc import IntegrityError, MultipleResultsFound, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from effect_service.core.domain_types import EffectId, EffectStatus, SellerId
from effect_service.core.effect import Effect
from effect_service.core.errors import DatabaseError
from effect_service.models.effect import EffectRecord, column_values

logger = logging.getLogger(__name__)

FailureMode = Literal["degrade", "raise"]

_UPDATABLE_COLUMNS = frozenset(column_values(Effect()).keys())


class SqlAlchemyEffectStore:
    """Durable CRUD and equality-filtered retrieval for effects."""

    def __init__(self, db: AsyncSession, failure_mode: FailureMode = "degrade"):
        self.db = db
        self.failure_mode = failure_mode

    # ─── Reads ───────────────────────────────────────────────────

    async def get_all(self) -> list[Effect]:
        try:
            effects = await self._fetch(_select_effects())
        except SQLAlchemyError as e:
            return await self._fail("get_all", e, [])
        logger.info(
            f"Retrieved {len(effects)} effects",
            extra={"operation": "get_all"},
        )
        return effects

    async def get(self, effect_id: EffectId) -> Effect | None:
        try:
            result = await self.db.execute(
                _select_effects().where(EffectRecord.id == effect_id),
            )
            record = result.scalar_one_or_none()
        except MultipleResultsFound as e:
            logger.error(
                f"Data integrity error: more than one effect with id {effect_id}",
                extra={"effect_id": str(effect_id), "operation": "get"},
            )
            return await self._fail("get", e, None, effect_id)
        except SQLAlchemyError as e:
            return await self._fail("get", e, None, effect_id)
        return record.to_entity() if record else None

    async def exists(self, effect_id: EffectId) -> bool:
        try:
            result = await self.db.execute(
                select(EffectRecord.id).where(EffectRecord.id == effect_id),
            )
            return result.first() is not None
        except SQLAlchemyError as e:
            return await self._fail("exists", e, False, effect_id)

    async def find_by_status(self, status: EffectStatus) -> list[Effect]:
        try:
            return await self._fetch(
                _select_effects().where(EffectRecord.status == status.value),
            )
        except SQLAlchemyError as e:
            return await self._fail("find_by_status", e, [])

    async def find_by_seller(self, seller_id: SellerId) -> list[Effect]:
        try:
            return await self._fetch(
                _select_effects().where(EffectRecord.seller == seller_id),
            )
        except SQLAlchemyError as e:
            return await self._fail("find_by_seller", e, [])

    # ─── Writes ──────────────────────────────────────────────────

    async def create(self, effect: Effect) -> EffectId | None:
        """Insert `effect` as given. Returns its id, or None on duplicate/failure."""
        try:
            await self.db.execute(
                insert(EffectRecord).values(
                    id=effect.effect_id, **column_values(effect),
                ),
            )
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            logger.warning(
                f"Effect {effect.effect_id} already exists",
                extra={"effect_id": str(effect.effect_id), "operation": "create"},
            )
            return None
        except SQLAlchemyError as e:
            return await self._fail("create", e, None, effect.effect_id)
        logger.info(
            f"Created effect with ID {effect.effect_id}",
            extra={"effect_id": str(effect.effect_id), "operation": "create"},
        )
        return effect.effect_id

    async def update(self, effect: Effect) -> bool:
        """Full replace keyed by id. False when the id is unknown or nothing changed."""
        values = column_values(effect)
        stmt = (
            update(EffectRecord)
            .where(EffectRecord.id == effect.effect_id)
            .where(or_(*(
                getattr(EffectRecord, name).is_distinct_from(value)
                for name, value in values.items()
            )))
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        return await self._write("update", effect.effect_id, stmt)

    async def conditional_update(
        self,
        effect_id: EffectId,
        expected_status: EffectStatus,
        **fields: object,
    ) -> bool:
        """Set `fields` only if the stored status equals `expected_status`."""
        unknown = set(fields) - _UPDATABLE_COLUMNS
        if unknown:
            raise ValueError(f"Unknown effect fields: {sorted(unknown)}")
        values = {
            name: value.value if isinstance(value, EffectStatus) else value
            for name, value in fields.items()
        }
        stmt = (
            update(EffectRecord)
            .where(EffectRecord.id == effect_id)
            .where(EffectRecord.status == expected_status.value)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        return await self._write("conditional_update", effect_id, stmt)

    async def delete(self, effect_id: EffectId) -> bool:
        stmt = (
            delete(EffectRecord)
            .where(EffectRecord.id == effect_id)
            .execution_options(synchronize_session=False)
        )
        return await self._write("delete", effect_id, stmt)

    # ─── Helpers ─────────────────────────────────────────────────

    async def _fetch(self, stmt) -> list[Effect]:
        result = await self.db.execute(stmt)
        return [record.to_entity() for record in result.scalars().all()]

    async def _write(self, operation: str, effect_id: EffectId, stmt) -> bool:
        try:
            result = await self.db.execute(stmt)
            await self.db.commit()
        except SQLAlchemyError as e:
            return await self._fail(operation, e, False, effect_id)
        logger.info(
            f"{operation} on effect {effect_id}: {result.rowcount} row(s) affected",
            extra={"effect_id": str(effect_id), "operation": operation},
        )
        return result.rowcount > 0

    async def _fail(self, operation: str, exc: Exception, fallback, effect_id=None):
        await self.db.rollback()
        logger.error(
            f"Effect store {operation} failed: {exc}",
            extra={
                "operation": operation,
                "effect_id": str(effect_id) if effect_id is not None else None,
                "error_code": "DATABASE_ERROR",
            },
        )
        if self.failure_mode == "raise":
            raise DatabaseError("Effect store unavailable", operation) from exc
        return fallback


def _select_effects():
    return select(EffectRecord).execution_options(populate_existing=True)
