"""Infrastructure Layer — database, custody, clock and logging adapters.

Invariants:
    - Infrastructure implements core/repository_protocols.py, never the reverse
    - External failures mapped to core/errors.py types at this boundary
"""
