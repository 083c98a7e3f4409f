"""
Session Module - Manages client sessions.

A session represents one client using the app:
- Created when the client connects
- Holds one engine per feature (login, store)
- Routes connectivity changes to both engines
- Destroyed when the client leaves, cancelling every effect

Sessions are EPHEMERAL: the only persistence is the product cache.
"""

from .manager import SessionManager, Session, SessionState

__all__ = [
    "SessionManager",
    "Session",
    "SessionState",
]
