"""
Tests for protection service bootstrap, configuration and error responses.
"""

import pytest
from prometheus_client import CollectorRegistry

from service_protection.app.main import build_protection_engine
from service_protection.app.protection.engine import ProtectionEngine
from service_protection.app.protection.models import OperationType
from service_protection.app.test_helpers import InMemoryUnitDirectory, TestDataFactory
from shared.config import ProtectionConfig, get_config
from shared.errors import CollaboratorError, ErrorCodes, ForbiddenError, ValidationError
from shared.metrics import MetricsCollector


class TestBootstrap:
    """Test cases for build_protection_engine."""

    @pytest.fixture
    def directory(self):
        return InMemoryUnitDirectory(units=[TestDataFactory.create_unit("U1")]).assign("R1", "U1")

    @pytest.mark.asyncio
    async def test_build_engine(self, directory):
        """Test that the bootstrapped engine evaluates against the given lookups."""
        metrics = MetricsCollector("protection", CollectorRegistry())
        engine = build_protection_engine(
            directory, directory, directory,
            config=ProtectionConfig(log_level="debug"),
            metrics=metrics
        )

        assert isinstance(engine, ProtectionEngine)
        assert engine.metrics is metrics
        assert await engine.evaluate_by_resource(
            "R1", OperationType.UPDATE, TestDataFactory.create_identity("alice")
        ) is True

    def test_engine_parses_headers_with_bootstrap_config(self, directory):
        """Test that the engine resolves identities with the config it was built with."""
        config = ProtectionConfig(user_id_header="X-User-Id")
        engine = build_protection_engine(directory, directory, directory, config=config)

        identity = engine.identity_from_headers({"X-User-Id": "alice", "X-Okapi-User-Id": "mallory"})

        assert engine.config is config
        assert identity.user_id == "alice"

    def test_build_engine_with_tracing(self, directory):
        """Test bootstrap with tracing enabled."""
        engine = build_protection_engine(
            directory, directory, directory,
            config=ProtectionConfig(enable_tracing=True)
        )

        assert engine.metrics.service_name == "protection"


class TestConfig:
    """Test cases for ProtectionConfig."""

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("PROTECTION_USER_ID_HEADER", raising=False)
        config = get_config()

        assert config.user_id_header == "x-okapi-user-id"
        assert config.tenant_header == "x-okapi-tenant"
        assert config.enable_tracing is False

    def test_environment_override(self, monkeypatch):
        monkeypatch.setenv("PROTECTION_USER_ID_HEADER", "x-user-id")
        monkeypatch.setenv("PROTECTION_LOG_LEVEL", "debug")

        config = get_config()

        assert config.user_id_header == "x-user-id"
        assert config.log_level == "debug"


class TestErrors:
    """Test cases for error types."""

    def test_forbidden_response(self):
        error = ForbiddenError(ErrorCodes.UNKNOWN_USER)
        response = error.to_response()

        assert error.status_code == 403
        assert response.code == "unknownUser"
        assert response.message == "Unknown user"
        assert response.trace_id is None

    def test_validation_response(self):
        error = ValidationError(details={"missing": ["U5"]})
        response = error.to_response()

        assert error.status_code == 422
        assert response.code == "orderAcqUnitsNotFound"
        assert response.details == {"missing": ["U5"]}

    def test_collaborator_error(self):
        error = CollaboratorError("units", "not found", status_code=404)

        assert error.status_code == 404
        assert error.service == "units"
        assert error.message == "units: not found"
        assert CollaboratorError("memberships").status_code == 502
