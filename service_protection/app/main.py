"""
Bootstrap for the Unit Protection Service.
"""

from typing import Optional

from shared.config import ProtectionConfig, get_config
from shared.logging import configure_logging, get_logger
from shared.metrics import MetricsCollector, get_metrics_collector
from shared.tracing import configure_tracing

from .protection.contracts import MembershipLookup, UnitAssignmentLookup, UnitLookup
from .protection.engine import ProtectionEngine


def build_protection_engine(assignments: UnitAssignmentLookup, units: UnitLookup,
                            memberships: MembershipLookup,
                            config: Optional[ProtectionConfig] = None,
                            metrics: Optional[MetricsCollector] = None) -> ProtectionEngine:
    """Configure observability and return an engine wired to the given lookups."""
    config = config or get_config()

    configure_logging(config.service_name, config.log_level)
    if config.enable_tracing:
        configure_tracing(config.service_name, enable_console=config.enable_console_tracing)

    logger = get_logger(f"{config.service_name}.bootstrap")
    logger.info("Protection engine configured", env=config.env, tracing=config.enable_tracing)

    return ProtectionEngine(
        assignments,
        units,
        memberships,
        metrics=metrics or get_metrics_collector(config.service_name),
        config=config
    )
