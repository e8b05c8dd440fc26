"""Services Layer — async orchestration around the pure core.

Invariants:
    - Services own IO sequencing; layout and serialization stay in core/
    - Card store access goes through the CardStore protocol

Design Decisions:
    - One file per concern: store, resolver, render pipeline
"""
