"""
Test Suite for Resilience Kit.

Test organization:
    - unit/: Unit tests for individual components
    - integration/: Components wired together through the factory
    - fixtures/: Shared test fixtures and sample data

Running Tests:
    pytest tests/                           # All tests
    pytest tests/unit/                      # Unit tests only
    pytest tests/integration/               # Integration tests only
"""
