"""Game domain services: dart classification, rules, checkout, achievements,
undo history and the turn/round state machine.

This package contains pure(ish) domain logic that should be imported by
HTTP routes and socket handlers, keeping transport concerns separated
from core game mechanics. Only ``scheduler`` knows about Flask.
"""
