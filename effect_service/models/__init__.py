"""ORM Models - SQLAlchemy declarative models for persisted entities.

Invariants:
    - All models inherit from Base (db/base.py)
    - Imported here so Base.metadata is complete before create_all/autogenerate
"""

from effect_service.models.effect import EffectRecord  # noqa: F401
