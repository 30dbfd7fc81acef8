"""Pydantic Schemas — request validation for API endpoints.

Invariants:
    - Schemas validate at the system boundary (request bodies)
    - Field names are snake_case on the wire

Design Decisions:
    - Separate from models: schemas are API contracts, models are persistence
    - Responses are shaped by services/presenters.py, not by schemas
"""
