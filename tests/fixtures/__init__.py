"""
Test Fixtures - Shared Test Data and Configurations.

This package contains reusable test fixtures:
    - sample_config.yaml: Sample settings file for loader tests
    - config/profiles/offline.yaml: Profile overlay for loader tests

Usage:
    Reference via the ``fixtures_dir`` / ``sample_config_path`` fixtures.
"""
