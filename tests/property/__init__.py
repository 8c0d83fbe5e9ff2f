# tests/property/__init__.py
"""Property-based tests for formflow.

Property-based testing validates invariants that must hold for ALL inputs,
not just the specific examples we think of. The ordering engine feeds
rendering and export, so determinism and rule enforcement are checked here.

Test categories:
- core/: Connection rules, cycle rejection, ordering determinism, flat round-trip
"""
