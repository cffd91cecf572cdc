"""Prometheus counters for webhook intake and notification delivery."""

from prometheus_client import CollectorRegistry, Counter


class WebhookMetrics:
    """Prometheus metrics for the webhook processor.

    Each instance owns its registry so tests can build fresh counters without
    colliding with the process-wide instance.
    """

    def __init__(self, registry: CollectorRegistry | None = None):
        self.registry = registry or CollectorRegistry()
        self.webhooks_received_total = Counter(
            "github_monitor_webhooks_received_total",
            "Webhook deliveries received",
            registry=self.registry,
        )
        self.invalid_signatures_total = Counter(
            "github_monitor_invalid_signatures_total",
            "Webhook deliveries rejected for a bad or missing signature",
            registry=self.registry,
        )
        self.events_ignored_total = Counter(
            "github_monitor_events_ignored_total",
            "Webhook deliveries acknowledged without processing",
            ["reason"],
            registry=self.registry,
        )
        self.diff_fetches_total = Counter(
            "github_monitor_diff_fetches_total",
            "Commit diff fetches",
            ["status"],
            registry=self.registry,
        )
        self.notifications_total = Counter(
            "github_monitor_notifications_total",
            "Notifications published",
            ["status"],
            registry=self.registry,
        )

    def record_received(self):
        self.webhooks_received_total.inc()

    def record_invalid_signature(self):
        self.invalid_signatures_total.inc()

    def record_ignored(self, reason: str):
        """Record a delivery that was acknowledged but not processed."""
        self.events_ignored_total.labels(reason=reason).inc()

    def record_diff_fetch(self, success: bool):
        self.diff_fetches_total.labels(status="success" if success else "error").inc()

    def record_notification(self, success: bool):
        self.notifications_total.labels(status="sent" if success else "error").inc()

    def value(self, name: str, **labels: str) -> float:
        """Current value of a sample, 0.0 when it has not been emitted yet."""
        return self.registry.get_sample_value(name, labels or None) or 0.0

    def snapshot(self) -> dict[str, float]:
        """Non-zero counter samples keyed in exposition form, for a log line."""
        samples: dict[str, float] = {}
        for family in self.registry.collect():
            for sample in family.samples:
                if not sample.name.endswith("_total") or not sample.value:
                    continue
                labels = ",".join(f'{k}="{v}"' for k, v in sorted(sample.labels.items()))
                key = f"{sample.name}{{{labels}}}" if labels else sample.name
                samples[key] = sample.value
        return samples
