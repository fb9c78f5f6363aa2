"""
Test Suite for ETL Framework.

Test organization:
    - unit/: Unit tests for individual components
    - integration/: Pipeline runs end to end
    - fixtures/: Shared test data

Running Tests:
    pytest tests/                           # All tests
    pytest tests/unit/                      # Unit tests only
    pytest --cov=src/etl_framework          # With coverage
"""
