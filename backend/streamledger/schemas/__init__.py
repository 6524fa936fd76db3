"""Pydantic Schemas — request/response validation for API endpoints.

Invariants:
    - Schemas validate shape and ranges at the system boundary
    - Ledger rules (exactly one of end_date/duration, positive funds, self-stream)
      stay in core/enforce_stream.py so they surface as typed ledger errors

Design Decisions:
    - Separate from models: schemas are API contracts, models are persistence
"""
