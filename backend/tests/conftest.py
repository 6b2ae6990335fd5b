"""Root conftest — shared test configuration."""

import os

# Ensure tests never reach a real database or real credentials
os.environ.setdefault("CRS_DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("CRS_AUTH_USERNAME", "user")
os.environ.setdefault("CRS_AUTH_PASSWORD", "pass")
