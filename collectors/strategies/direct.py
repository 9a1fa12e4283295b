"""Direct lookup strategy: named counters queried through a counter table handle"""
import logging
from typing import Dict, Optional
from .base import CollectionMethod, CollectionStrategy, RawSample
from perfdata import (
    EMPTY_INSTANCE,
    CounterTable,
    InstanceNotFoundError,
    PerfDataError,
    PerfDataSource,
)

logger = logging.getLogger(__name__)


class DirectLookupStrategy(CollectionStrategy):
    """Query the catalog's counters by name for the singleton instance"""

    method = CollectionMethod.DIRECT

    def __init__(self, catalog, source: PerfDataSource):
        super().__init__(catalog)
        self.source = source
        self._table: Optional[CounterTable] = None

    def open(self) -> None:
        self._table = self.source.open_counter_table(self.catalog.object_name, self.catalog.identifiers)
        logger.info(f"Opened counter table for {self.catalog.object_name} with {len(self.catalog)} counters")

    def acquire(self, ctx) -> Dict[str, RawSample]:
        if self._table is None:
            raise PerfDataError(f"counter table for '{self.catalog.object_name}' is not open")

        try:
            result = self._table.collect()
        except PerfDataError:
            raise
        except Exception as e:
            raise PerfDataError(f"failed to collect {self.catalog.object_name} metrics: {e}") from e

        data = result.get(EMPTY_INSTANCE)
        if data is None:
            raise InstanceNotFoundError(self.catalog.object_name, EMPTY_INSTANCE)

        samples = {}
        for identifier in self.catalog.identifiers:
            values = data.get(identifier)
            if values is None:
                raise InstanceNotFoundError(self.catalog.object_name, EMPTY_INSTANCE, identifier)
            samples[identifier] = RawSample(identifier=identifier, value=float(values.first_value))
        return samples

    def close(self) -> None:
        if self._table is not None:
            self._table.close()
            self._table = None
