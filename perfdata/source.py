"""Interfaces to the native performance counter subsystem"""
import abc
from typing import Dict, List
from .models import CounterValues


class CounterTable(abc.ABC):
    """Handle to a fixed set of named counters of one performance object"""

    @abc.abstractmethod
    def collect(self) -> Dict[str, Dict[str, CounterValues]]:
        """Return current values keyed by instance, then by counter name"""
        pass

    @abc.abstractmethod
    def close(self) -> None:
        """Release the underlying handle"""
        pass


class PerfDataSource(abc.ABC):
    """Provides snapshots and counter tables for named performance objects"""

    @abc.abstractmethod
    def get_object_snapshot(self, object_name: str) -> bytes:
        """Return the current snapshot blob of a performance object"""
        pass

    @abc.abstractmethod
    def open_counter_table(self, object_name: str, counters: List[str]) -> CounterTable:
        """Open a handle that queries the given counters of a performance object"""
        pass
