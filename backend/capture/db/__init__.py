"""Database Definitions — SQLAlchemy table metadata for captured entries.

Invariants:
    - Table name is configuration, so tables are built per name, not declared globally
"""
