"""Pydantic Schemas — request/response contracts for the API.

Invariants:
    - Input is validated at the boundary; services receive clean values
    - Schemas are API contracts, models/ is persistence
"""
