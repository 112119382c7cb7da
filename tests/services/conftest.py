"""Service test fixtures - SQL store over SQLite plus the two services.

Invariants:
    - store/lifecycle/queries share the per-test SQLite session
    - Scriptable doubles live in tests/services/fake_store.py
"""

import pytest

from effect_service.infrastructure.effect_store import SqlAlchemyEffectStore
from effect_service.services.effect_lifecycle import EffectLifecycleService
from effect_service.services.effect_queries import EffectQueryService


@pytest.fixture
def store(test_db):
    return SqlAlchemyEffectStore(test_db)


@pytest.fixture
def lifecycle(store):
    return EffectLifecycleService(store)


@pytest.fixture
def queries(store):
    return EffectQueryService(store)
