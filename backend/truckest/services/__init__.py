"""Services Layer — async use cases over the ORM, one module per resource.

Invariants:
    - Services raise TruckEstError subclasses; routes never build error bodies
    - Each service owns its commit (no commits inside routes)

Design Decisions:
    - Response shaping lives in presenters.py so services return ORM rows
"""
