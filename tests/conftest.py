"""Shared fixtures for exporter tests"""
import json
from typing import Dict, List
import pytest

from collectors.dhcp import DHCP_CATALOG, PERF_OBJECT
from perfdata import CounterTable, CounterValues, EMPTY_INSTANCE, PerfDataSource, PerfObjectNotFoundError


def dhcp_counter_values() -> Dict[str, float]:
    """Distinct value for every DHCP counter, keyed by counter name"""
    return {identifier: float(index + 1) for index, identifier in enumerate(DHCP_CATALOG.identifiers)}


def snapshot_blob(instances: List[Dict[str, float]], object_name: str = PERF_OBJECT,
                  names: List[str] = None) -> bytes:
    """Encode a performance object snapshot the way counter dumps are written"""
    names = names or [EMPTY_INSTANCE] * len(instances)
    return json.dumps({
        "name": object_name,
        "instances": [{"name": name, "counters": counters} for name, counters in zip(names, instances)],
    }).encode()


class FakeCounterTable(CounterTable):
    def __init__(self, result):
        self.result = result
        self.closed = False
        self.collect_calls = 0

    def collect(self):
        self.collect_calls += 1
        if isinstance(self.result, Exception):
            raise self.result
        return self.result

    def close(self):
        self.closed = True


class FakePerfDataSource(PerfDataSource):
    """In-memory source serving one DHCP Server reading on both access paths"""

    def __init__(self, counters: Dict[str, float] = None, table_result=None, open_error: Exception = None):
        self.counters = dhcp_counter_values() if counters is None else counters
        self.table_result = table_result
        self.open_error = open_error
        self.snapshots: Dict[str, bytes] = {PERF_OBJECT: snapshot_blob([self.counters])}
        self.tables: List[FakeCounterTable] = []
        self.opened_with = None

    def get_object_snapshot(self, object_name):
        if object_name not in self.snapshots:
            raise PerfObjectNotFoundError(object_name, "no snapshot")
        return self.snapshots[object_name]

    def open_counter_table(self, object_name, counters):
        if self.open_error is not None:
            raise self.open_error
        self.opened_with = (object_name, list(counters))
        result = self.table_result
        if result is None:
            result = {EMPTY_INSTANCE: {name: CounterValues(value, 0.0) for name, value in self.counters.items()}}
        table = FakeCounterTable(result)
        self.tables.append(table)
        return table


@pytest.fixture
def counter_values():
    return dhcp_counter_values()


@pytest.fixture
def fake_source():
    return FakePerfDataSource()
