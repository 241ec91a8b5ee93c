"""Infrastructure Layer — database, storage, mail, security and logging adapters.

Invariants:
    - External failures are mapped onto core/errors.py types at this boundary
"""
