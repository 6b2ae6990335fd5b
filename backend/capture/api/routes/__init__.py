"""Route Modules — one file per resource/concern.

Invariants:
    - Routes are built from explicit collaborators (store, credentials), not globals
    - Routes never contain validation logic (delegated to gates and core/)

Design Decisions:
    - Explicit registration in main.py over auto-discovery
"""
