"""
Shared utilities for the Unit Protection Service.

This package aggregates common building blocks consumed by service code:

- config: Service configuration via pydantic-settings
- logging: Structured logging with trace correlation
- metrics: Prometheus metrics helpers
- tracing: OpenTelemetry tracing config
- errors: Canonical error types and responses

Do not import from service_* packages into shared/.
"""
