"""Configuration for property-based tests.

This module configures Hypothesis settings for property-based testing,
ensuring appropriate test case generation and execution timeouts.
"""

from hypothesis import HealthCheck, Verbosity, settings

# Default settings for property tests
settings.register_profile(
    "default",
    max_examples=100,
    deadline=5000,  # 5 seconds per test
    suppress_health_check=[
        HealthCheck.too_slow,
        HealthCheck.function_scoped_fixture,
    ],
)

# Fast settings for CI or quick testing
settings.register_profile(
    "fast",
    max_examples=30,
    deadline=2000,
    suppress_health_check=[
        HealthCheck.too_slow,
        HealthCheck.function_scoped_fixture,
        HealthCheck.filter_too_much,
    ],
)

# Development settings for debugging
settings.register_profile(
    "debug",
    max_examples=10,
    deadline=None,
    verbosity=Verbosity.verbose,
    suppress_health_check=[
        HealthCheck.too_slow,
        HealthCheck.function_scoped_fixture,
    ],
)

settings.load_profile("default")
