"""
Test Suite

Structure:
    tests/
    ├── __init__.py         # This file
    ├── conftest.py         # Pytest fixtures
    ├── fakes.py            # In-memory collection and registry doubles
    ├── factories.py        # Form configuration / template builders
    ├── unit/               # Unit tests
    │   ├── test_engine/    # Resolver, visibility, validator, renderer
    │   ├── test_repositories/
    │   ├── test_services/
    │   ├── test_scripts/   # Seeded defaults
    │   └── test_utils/
    └── integration/
        └── test_api/       # FastAPI routes over in-memory collections

To run tests:
    pytest backend/tests/
    pytest backend/tests/unit/
"""
