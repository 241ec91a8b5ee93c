"""Services Layer — async orchestration of core rules, persistence and adapters.

Invariants:
    - Services take an AsyncSession and commit their own unit of work
    - Domain failures raise core/errors.py types, never HTTPException
"""
