"""Jobly Test Suite.

This package contains unit and integration tests for the Jobly data-access layer.

Test Structure:
- unit/: Unit tests for builders, executor, config and database classes
- integration/: Tests against a real PostgreSQL database (opt-in)
"""
