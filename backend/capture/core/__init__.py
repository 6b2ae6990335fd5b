"""Core Layer — entry model, schema, auth parsing and errors. No IO, no async, no DB.

Invariants:
    - No module in core/ imports from api/, infrastructure/, or db/
    - All functions are pure apart from the injectable clock in new_entry

Design Decisions:
    - Functional core separated from imperative shell: gates and stores live outside
"""
