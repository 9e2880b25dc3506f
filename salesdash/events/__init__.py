"""Event records and the stores that supply point-in-time snapshots.

- model.py: Event dataclass, field coercion, label normalisation
- store.py: EventStore interface, in-memory and JSON-file stores
"""
