"""BoothBoss Application Package — photo booth event platform API.

Invariants:
    - Package root contains no executable code (no import side effects)
"""
