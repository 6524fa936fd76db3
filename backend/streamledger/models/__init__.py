"""ORM Models — SQLAlchemy declarative models for the ledger tables.

Invariants:
    - All models inherit from Base (db/base.py)
    - streams rows are never deleted; ledger_state holds exactly one row

Design Decisions:
    - One file per table for locality
    - All models imported here so Base.metadata is complete before create_all
"""

from streamledger.models.stream import StreamRecord  # noqa: F401
from streamledger.models.ledger_state import LedgerState  # noqa: F401
from streamledger.models.custody_transfer import CustodyTransferRecord  # noqa: F401
