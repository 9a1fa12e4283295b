"""Metric data models"""
from dataclasses import dataclass, field
from typing import Dict
from enum import Enum


class MetricType(Enum):
    """Prometheus metric types"""
    COUNTER = "counter"
    GAUGE = "gauge"


@dataclass(frozen=True)
class MetricValue:
    """Represents a single metric sample handed to the exposition layer"""
    name: str
    value: float
    help_text: str
    metric_type: MetricType = MetricType.GAUGE
    labels: Dict[str, str] = field(default_factory=dict)
