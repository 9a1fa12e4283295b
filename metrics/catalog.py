"""Static counter catalogs and the metric descriptors derived from them"""
from dataclasses import dataclass
from typing import Dict, Iterator, List, Sequence, Tuple
from .models import MetricType


def build_fq_name(namespace: str, subsystem: str, name: str) -> str:
    """Join non-empty name parts with underscores"""
    return "_".join(part for part in (namespace, subsystem, name) if part)


@dataclass(frozen=True)
class CounterDescriptor:
    """A raw performance counter and how it is exported"""
    identifier: str
    metric_name: str
    kind: MetricType
    field_name: str
    help_text: str


@dataclass(frozen=True)
class MetricDescriptor:
    """An exported, unlabeled metric"""
    name: str
    help_text: str
    kind: MetricType


class Catalog:
    """Immutable, ordered set of counters exported by one collector"""

    def __init__(self, subsystem: str, object_name: str, entries: Sequence[CounterDescriptor]):
        self.subsystem = subsystem
        self.object_name = object_name
        self._entries: Tuple[CounterDescriptor, ...] = tuple(entries)

        seen_ids = set()
        seen_names = set()
        for entry in self._entries:
            if entry.identifier in seen_ids:
                raise ValueError(f"duplicate counter identifier in {subsystem} catalog: {entry.identifier}")
            if entry.metric_name in seen_names:
                raise ValueError(f"duplicate metric name in {subsystem} catalog: {entry.metric_name}")
            seen_ids.add(entry.identifier)
            seen_names.add(entry.metric_name)

    def __iter__(self) -> Iterator[CounterDescriptor]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def identifiers(self) -> List[str]:
        return [entry.identifier for entry in self._entries]

    @property
    def field_names(self) -> List[str]:
        return [entry.field_name for entry in self._entries]

    def build_descriptors(self, namespace: str) -> Dict[str, MetricDescriptor]:
        """Create one metric descriptor per counter, keyed by counter identifier"""
        return {
            entry.identifier: MetricDescriptor(
                name=build_fq_name(namespace, self.subsystem, entry.metric_name),
                help_text=entry.help_text,
                kind=entry.kind,
            )
            for entry in self._entries
        }
