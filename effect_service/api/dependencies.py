"""Route Dependencies - wire per-request store and services, process-wide image store.

Invariants:
    - One SqlAlchemyEffectStore per request, bound to that request's AsyncSession
    - Services are rebuilt per request (they hold no state beyond the store)
    - Tests override get_db and get_image_store via app.dependency_overrides
"""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from effect_service.config import get_settings
from effect_service.infrastructure.database import get_db
from effect_service.infrastructure.effect_store import SqlAlchemyEffectStore
from effect_service.infrastructure.image_store import LocalImageStore
from effect_service.services.effect_lifecycle import EffectLifecycleService
from effect_service.services.effect_queries import EffectQueryService


def get_effect_store(db: AsyncSession = Depends(get_db)) -> SqlAlchemyEffectStore:
    return SqlAlchemyEffectStore(db, get_settings().storage_failure_mode)


def get_lifecycle_service(
    store: SqlAlchemyEffectStore = Depends(get_effect_store),
) -> EffectLifecycleService:
    return EffectLifecycleService(store)


def get_query_service(
    store: SqlAlchemyEffectStore = Depends(get_effect_store),
) -> EffectQueryService:
    return EffectQueryService(store)


def get_image_store() -> LocalImageStore:
    settings = get_settings()
    return LocalImageStore(settings.image_path, settings.image_url_path)
