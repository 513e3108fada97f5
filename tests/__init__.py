"""
MedsBuddy Test Suite
====================

This package contains all tests for the MedsBuddy medication adherence backend.

Test Structure:
- test_tools/: Pure helpers (time window, aggregator, renderer, email delivery)
- test_services/: Service-layer tests against an in-memory database
- test_api/: API endpoint tests for FastAPI routes
- conftest.py: Shared pytest fixtures

Running Tests:
    # Run all tests
    pytest

    # Run specific test module
    pytest tests/test_api/

    # Run only marked tests
    pytest -m "unit"
    pytest -m "api"
"""
