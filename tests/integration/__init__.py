"""
Integration test package for the task store.

Tests patch ``requests.request`` and demonstrate:
- Header and query-string construction
- Error translation for timeouts, connection failures and error statuses
- Store flows against an in-memory backend
"""
