"""Prometheus text exposition of collected metric values"""
from typing import Dict, Iterator, List
from prometheus_client import CONTENT_TYPE_LATEST, CollectorRegistry, generate_latest
from prometheus_client.core import CounterMetricFamily, GaugeMetricFamily
from prometheus_client.registry import Collector
from ..models import MetricType, MetricValue


class SnapshotCollector(Collector):
    """Custom collector that hands one scrape's values to prometheus_client"""

    def __init__(self, metrics: List[MetricValue]):
        self.metrics = metrics

    def collect(self) -> Iterator:
        # Group metrics by name so each family carries a single HELP/TYPE
        metrics_by_name: Dict[str, List[MetricValue]] = {}
        for metric in self.metrics:
            metrics_by_name.setdefault(metric.name, []).append(metric)

        for name, metric_list in metrics_by_name.items():
            first = metric_list[0]
            label_names = sorted(first.labels)
            if first.metric_type == MetricType.COUNTER:
                family = CounterMetricFamily(name, first.help_text, labels=label_names)
            else:
                family = GaugeMetricFamily(name, first.help_text, labels=label_names)

            for metric in metric_list:
                family.add_metric([metric.labels[key] for key in label_names], metric.value)
            yield family


class PrometheusExporter:
    """Render metrics in the Prometheus text format"""

    content_type = CONTENT_TYPE_LATEST

    def export_metrics(self, metrics: List[MetricValue]) -> bytes:
        """Convert metrics to Prometheus format"""
        registry = CollectorRegistry(auto_describe=False)
        registry.register(SnapshotCollector(metrics))
        return generate_latest(registry)
