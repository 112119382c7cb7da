"""Infrastructure Layer - database, effect store, image files and logging.

Invariants:
    - Infrastructure implements core contracts; core never imports from here
    - Failures are mapped to core/errors.py types before leaving this layer
"""
