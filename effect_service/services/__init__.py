"""Service Layer - lifecycle and query orchestration over the EffectStore contract.

Invariants:
    - Services depend on core/ and the EffectStore protocol, never on SQLAlchemy
    - Business rules are decided in core/, applied here
"""
