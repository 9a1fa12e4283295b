"""Base collector class and interfaces"""
import asyncio
from abc import ABC, abstractmethod
from concurrent.futures import ThreadPoolExecutor
from enum import Enum
from typing import Dict, List, Optional
from metrics.models import MetricValue
from perfdata import PerfObjectNotFoundError


class CollectorError(Exception):
    """Base class for collector failures"""


class CollectorInitError(CollectorError):
    """A collector could not be built; fatal at startup"""


class CollectorStateError(CollectorError):
    """A lifecycle hook was called in the wrong state"""


class CollectorState(Enum):
    UNINITIALIZED = "uninitialized"
    BUILT = "built"
    CLOSED = "closed"


class ScrapeContext:
    """Per-scrape snapshots of the performance objects collectors asked for"""

    def __init__(self, perf_objects: Optional[Dict[str, bytes]] = None,
                 errors: Optional[Dict[str, Exception]] = None):
        self.perf_objects = perf_objects or {}
        self.errors = errors or {}

    def get_perf_object(self, name: str) -> bytes:
        """Return the snapshot blob of ``name``, or raise why it is unavailable"""
        if name in self.errors:
            raise self.errors[name]
        if name not in self.perf_objects:
            raise PerfObjectNotFoundError(name, "not captured for this scrape")
        return self.perf_objects[name]


class BaseCollector(ABC):
    """Base class for all metric collectors.

    Collectors go through ``build()`` once, ``collect()`` once per scrape and
    ``close()`` at shutdown.
    """

    def __init__(self, config=None, name: str = "", help_text: str = ""):
        self.config = config
        self._name = name
        self._help_text = help_text
        self._state = CollectorState.UNINITIALIZED
        self._executor = ThreadPoolExecutor(max_workers=2, thread_name_prefix=f"{name}_collector")

    def build(self) -> None:
        """Prepare descriptors and acquisition resources"""
        self._state = CollectorState.BUILT

    @abstractmethod
    def collect(self, ctx: ScrapeContext) -> List[MetricValue]:
        """Collect metrics and return list of MetricValue objects"""
        pass

    async def collect_async(self, ctx: ScrapeContext) -> List[MetricValue]:
        """Async version of collect method"""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(self._executor, self.collect, ctx)

    def get_perf_objects(self) -> List[str]:
        """Performance objects to snapshot before each scrape"""
        return []

    @property
    def name(self) -> str:
        """Collector name for identification"""
        return self._name

    @property
    def help_text(self) -> str:
        """Help text describing what this collector does"""
        return self._help_text or f"{self.name} metrics collector"

    @property
    def state(self) -> CollectorState:
        return self._state

    @property
    def is_built(self) -> bool:
        return self._state == CollectorState.BUILT

    def is_enabled(self) -> bool:
        """Check if this collector is enabled"""
        if hasattr(self.config, 'is_collector_enabled'):
            return self.config.is_collector_enabled(self.name)
        return True

    def _require_built(self) -> None:
        if self._state != CollectorState.BUILT:
            raise CollectorStateError(f"collector '{self.name}' is {self._state.value}, not built")

    def close(self) -> None:
        """Release resources held by the collector"""
        self._state = CollectorState.CLOSED
        self._executor.shutdown(wait=False)
