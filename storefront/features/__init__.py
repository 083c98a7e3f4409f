"""
Features - One state, one action set and one reducer per screen.

- login: credential entry and authentication
- store: catalog browsing, cart, checkout, cache/network reconciliation
"""
