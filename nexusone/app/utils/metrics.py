"""Prometheus metrics for the policy pipeline and chat relay."""

from prometheus_client import Counter, Histogram

policy_validations_total = Counter(
    "policy_validations_total",
    "Total policy chunk-completeness checks",
    ["result"],
)

policy_extractions_total = Counter(
    "policy_extractions_total",
    "Total policy text extractions",
    ["outcome"],
)

upstream_latency_ms = Histogram(
    "upstream_latency_ms",
    "Augmentation service call latency in milliseconds",
    ["service", "outcome"],
    buckets=[10, 50, 100, 250, 500, 1000, 2500, 5000, 10000, 30000],
)

chat_requests_total = Counter(
    "chat_requests_total",
    "Total onboarding chat requests",
    ["outcome"],
)


class PrometheusPipelineMetrics:
    """Prometheus-based pipeline metrics implementation."""

    def inc_validation(self, valid: bool) -> None:
        """Increment validation counter."""
        policy_validations_total.labels(result="valid" if valid else "invalid").inc()

    def inc_extraction(self, outcome: str) -> None:
        """Increment extraction counter."""
        policy_extractions_total.labels(outcome=outcome).inc()

    def record_upstream(self, service: str, outcome: str, latency_ms: float) -> None:
        """Record augmentation service call latency."""
        upstream_latency_ms.labels(service=service, outcome=outcome).observe(latency_ms)

    def inc_chat(self, outcome: str) -> None:
        """Increment chat request counter."""
        chat_requests_total.labels(outcome=outcome).inc()
