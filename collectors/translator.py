"""Translation of raw counter samples into typed metric values"""
from typing import Dict, Iterator
from metrics.catalog import Catalog, MetricDescriptor
from metrics.models import MetricValue
from .strategies.base import RawSample


def translate(catalog: Catalog, descriptors: Dict[str, MetricDescriptor],
              samples: Dict[str, RawSample]) -> Iterator[MetricValue]:
    """Yield one metric value per catalog entry, in catalog order.

    ``samples`` must hold a reading for every catalog identifier; strategies
    raise before returning an incomplete set, so nothing here can fail.
    """
    for entry in catalog:
        descriptor = descriptors[entry.identifier]
        yield MetricValue(
            name=descriptor.name,
            value=samples[entry.identifier].value,
            help_text=descriptor.help_text,
            metric_type=descriptor.kind,
        )
