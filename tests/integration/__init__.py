"""
Integration Tests - Wired Resilience Layer.

These tests verify that executor, cache, and loading machines work
together when built by the factory. A stand-in product API replaces
the network so the tests have no external dependencies.

Test Files:
    - test_fallback_with_loading.py: Outage handling and factory wiring
"""
