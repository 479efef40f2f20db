"""
Unit Protection Service package.

This package decides whether a user may perform an operation on a
resource governed by organizational units. It provides:

- app.main: Bootstrap helpers wiring configuration, logging and tracing.
- app.protection: Models, lookup contracts and the evaluation engine.
- app.test_helpers: Factories and an in-memory unit directory for tests.

Guidelines:
- The engine is stateless; collaborators own storage and transport.
- Failures from collaborators are never masked or downgraded.
"""
