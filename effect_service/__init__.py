"""Effect Service - lifecycle management for auction effects (intake, auction, sale).

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
"""
