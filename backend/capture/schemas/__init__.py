"""Pydantic Schemas — response envelopes for the capture API.

Invariants:
    - Envelopes validate at the system boundary (what leaves the service)
    - status in the body always equals the HTTP status code

Design Decisions:
    - Separate from core/entry.py: the entry is a domain model, envelopes are API contracts
"""
