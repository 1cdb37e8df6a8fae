"""
repostage Test Suite
====================

Test organization mirrors the source code structure:
    tests/
    ├── test_core/          → Tests for repostage.core (config, models, exceptions, logging)
    ├── test_infrastructure/→ Tests for repostage.infrastructure (layouts, factories, installer, POMs)
    ├── test_orchestration/ → Tests for the staging orchestrator
    ├── test_integrations/  → Tests for the build manifest loader
    ├── test_integration/   → End-to-end staging scenarios
    ├── test_facade.py      → RepoStage facade
    ├── test_cli.py         → `repostage stage`
    └── conftest.py         → Shared pytest fixtures (build workspace, installer)

Running Tests:
    pytest                          # Run all tests
    pytest tests/test_core/         # Run only core tests
"""
