"""Database Layer — declarative base shared by models and Alembic.

Invariants:
    - Sessions come from infrastructure/database.py (requests and seed alike)
"""
