"""Base strategy interface for performance counter acquisition"""
import abc
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional
from metrics.catalog import Catalog
from perfdata import EMPTY_INSTANCE


class CollectionMethod(Enum):
    """Available counter acquisition methods"""
    LEGACY = "legacy"
    DIRECT = "direct"


DEFAULT_COLLECTION_METHOD = CollectionMethod.LEGACY


def parse_collection_method(value: Optional[str]) -> Optional[CollectionMethod]:
    """Map a configured engine name to a method, or None if it is not recognized"""
    if value is None:
        return None
    try:
        return CollectionMethod(value.strip().lower())
    except ValueError:
        return None


@dataclass(frozen=True)
class RawSample:
    """One counter reading taken during a scrape"""
    identifier: str
    value: float
    instance: str = EMPTY_INSTANCE


class CollectionStrategy(abc.ABC):
    """Abstract base class for counter acquisition strategies"""

    method: CollectionMethod

    def __init__(self, catalog: Catalog):
        self.catalog = catalog

    @property
    def name(self) -> str:
        return self.method.value

    @property
    def perf_objects(self) -> List[str]:
        """Performance objects that must be snapshotted for each scrape"""
        return []

    def open(self) -> None:
        """Acquire long-lived resources; called once when the collector is built"""
        pass

    @abc.abstractmethod
    def acquire(self, ctx) -> Dict[str, RawSample]:
        """Read one sample per catalog entry, keyed by counter identifier"""
        pass

    def close(self) -> None:
        """Release resources acquired in open()"""
        pass
