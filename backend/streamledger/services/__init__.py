"""Services Layer — the imperative shell around the pure ledger core.

Invariants:
    - Services sequence repository and custody IO around core/ rules
    - No HTTP or ORM types cross into services (Protocols only)
"""
