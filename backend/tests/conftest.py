"""Root conftest — shared test configuration."""

import os

# Tests never touch a real database or custody service
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("LEDGER_OWNER", "owner-test")
os.environ.setdefault("CUSTODY_MODE", "book_entry")
