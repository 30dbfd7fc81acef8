"""TruckEst Application Package — truck damage inspection and repair-time estimation API.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
"""
