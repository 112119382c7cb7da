"""Pydantic Schemas - request/response validation for API endpoints.

Invariants:
    - Schemas validate at system boundary (form fields, JSON bodies, responses)
    - Domain types from core/ used for enum fields
"""
