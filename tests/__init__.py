"""
Test suite for the task store.

This package contains:
- unit/: store state transitions, models and query helpers against fakes
- integration/: the HTTP client and store flows with a patched transport
"""
