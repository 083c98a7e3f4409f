"""
Storefront - Offline-first catalog and cart engine

A unidirectional, action-driven state machine for a shopping client.
The engine keeps one authoritative state per screen and provides:
- Login and store reducers
- Cart arithmetic
- Cache-then-network catalog reconciliation
- An effect engine that runs asynchronous work and feeds results back as actions
"""

__version__ = "0.1.0"
