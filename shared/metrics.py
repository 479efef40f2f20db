"""
Shared metrics configuration for the Unit Protection Service.
"""

from typing import Any, Dict, Optional

from prometheus_client import CollectorRegistry, Counter, Histogram, Info


class MetricsCollector:
    """Centralized metrics collector for the service."""

    def __init__(self, service_name: str, registry: Optional[CollectorRegistry] = None):
        self.service_name = service_name
        # A private registry keeps independent collectors from clashing on metric names
        self.registry = registry if registry is not None else CollectorRegistry()
        self._metrics: Dict[str, Any] = {}
        self._setup_metrics()

    def _setup_metrics(self):
        """Set up protection evaluation metrics."""

        self._metrics["service_info"] = Info(
            "service_info",
            "Service information",
            registry=self.registry
        )
        self._metrics["service_info"].info({
            "service": self.service_name,
            "version": "1.0.0"
        })

        self._metrics["protection_evaluations_total"] = Counter(
            "protection_evaluations_total",
            "Total protection evaluations",
            ["operation", "outcome"],
            registry=self.registry
        )

        self._metrics["protection_evaluation_duration_seconds"] = Histogram(
            "protection_evaluation_duration_seconds",
            "Protection evaluation duration in seconds",
            ["operation"],
            registry=self.registry
        )

        self._metrics["protection_lookups_total"] = Counter(
            "protection_lookups_total",
            "Total collaborator lookups issued",
            ["lookup"],
            registry=self.registry
        )

    def record_evaluation(self, operation: str, outcome: str, duration: float):
        """Record a finished evaluation."""
        self._metrics["protection_evaluations_total"].labels(
            operation=operation, outcome=outcome
        ).inc()
        self._metrics["protection_evaluation_duration_seconds"].labels(
            operation=operation
        ).observe(duration)

    def record_lookup(self, lookup: str):
        """Count a lookup issued to a collaborator."""
        self.increment_counter("protection_lookups_total", lookup=lookup)

    def increment_counter(self, metric_name: str, **labels):
        """Increment a counter metric."""
        if metric_name in self._metrics:
            self._metrics[metric_name].labels(**labels).inc()

    def sample_value(self, name: str, **labels) -> Optional[float]:
        """Read back a sample, e.g. ``protection_evaluations_total``."""
        return self.registry.get_sample_value(name, labels)


def get_metrics_collector(service_name: str, registry: Optional[CollectorRegistry] = None) -> MetricsCollector:
    """Get a metrics collector for a service."""
    return MetricsCollector(service_name, registry)
