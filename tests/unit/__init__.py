"""
Unit Tests - Testing Individual Components in Isolation.

Each component is tested in isolation with fake clocks, recording
sleeps and scripted operations. Unit tests should be fast,
deterministic, and focused.

Test Files:
    - test_error_classifier.py: Classification, severity, enrichment
    - test_error_handler.py: Retry, fallback and batch handling
    - test_fallback_executor.py: The six fallback strategies
    - test_ttl_cache.py: Expiry, eviction and statistics
    - test_loading_state_machine.py: Loading timers and transitions
    - test_config_loader.py: Configuration loading/validation
"""
