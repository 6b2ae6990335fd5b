"""API Layer — gate chain, routes, response encoding and global error handlers.

Invariants:
    - All endpoints return structured JSON responses
"""
