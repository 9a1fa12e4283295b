"""Tests for counter acquisition strategies"""
import pytest
from pydantic import BaseModel, Field

from collectors.base import ScrapeContext
from collectors.dhcp import DHCP_CATALOG, DhcpPerf, PERF_OBJECT
from collectors.strategies import (
    CollectionMethod,
    DirectLookupStrategy,
    FieldBindingError,
    StructuredDecodeStrategy,
    parse_collection_method,
)
from metrics.catalog import Catalog, CounterDescriptor
from metrics.models import MetricType
from perfdata import (
    CounterTableError,
    CounterValues,
    EMPTY_INSTANCE,
    InstanceNotFoundError,
    PerfDataDecodeError,
    PerfDataError,
    PerfObjectNotFoundError,
)
from conftest import FakePerfDataSource, snapshot_blob


class TestParseCollectionMethod:
    def test_known_values(self):
        assert parse_collection_method("legacy") == CollectionMethod.LEGACY
        assert parse_collection_method(" DIRECT ") == CollectionMethod.DIRECT

    def test_unknown_values(self):
        assert parse_collection_method("pdh2") is None
        assert parse_collection_method("") is None
        assert parse_collection_method(None) is None


class TestStructuredDecodeStrategy:
    """Test snapshot-based acquisition"""

    def setup_method(self):
        self.strategy = StructuredDecodeStrategy(DHCP_CATALOG, DhcpPerf)
        self.strategy.open()

    def test_advertises_perf_object(self):
        assert self.strategy.perf_objects == [PERF_OBJECT]
        assert self.strategy.name == "legacy"

    def test_acquire(self, counter_values):
        ctx = ScrapeContext({PERF_OBJECT: snapshot_blob([counter_values])})

        samples = self.strategy.acquire(ctx)

        assert set(samples) == set(DHCP_CATALOG.identifiers)
        for identifier, value in counter_values.items():
            assert samples[identifier].value == value
            assert samples[identifier].instance == EMPTY_INSTANCE

    def test_uses_singleton_instance(self, counter_values):
        total = dict(counter_values, **{"Acks/sec": 1000})
        blob = snapshot_blob([total, counter_values], names=["_Total", EMPTY_INSTANCE])

        assert self.strategy.acquire(ScrapeContext({PERF_OBJECT: blob}))["Acks/sec"].value == counter_values["Acks/sec"]

    def test_sole_named_instance(self, counter_values):
        blob = snapshot_blob([counter_values], names=[PERF_OBJECT])

        assert len(self.strategy.acquire(ScrapeContext({PERF_OBJECT: blob}))) == len(DHCP_CATALOG)

    def test_no_singleton_instance(self, counter_values):
        blob = snapshot_blob([counter_values, counter_values], names=["a", "b"])

        with pytest.raises(InstanceNotFoundError, match="not found"):
            self.strategy.acquire(ScrapeContext({PERF_OBJECT: blob}))

    def test_no_records(self):
        ctx = ScrapeContext({PERF_OBJECT: snapshot_blob([])})

        with pytest.raises(PerfObjectNotFoundError, match="no records"):
            self.strategy.acquire(ctx)

    def test_snapshot_not_captured(self):
        with pytest.raises(PerfObjectNotFoundError):
            self.strategy.acquire(ScrapeContext())

    def test_snapshot_error_is_reraised(self):
        error = PerfObjectNotFoundError(PERF_OBJECT, "service stopped")

        with pytest.raises(PerfObjectNotFoundError, match="service stopped"):
            self.strategy.acquire(ScrapeContext(errors={PERF_OBJECT: error}))

    def test_decode_error(self):
        with pytest.raises(PerfDataDecodeError):
            self.strategy.acquire(ScrapeContext({PERF_OBJECT: b"garbage"}))


class PartialRecord(BaseModel):
    acks_total: float = Field(alias="Acks/sec")


class MisboundRecord(BaseModel):
    acks_total: float = Field(alias="Nacks/sec")
    nacks_total: float = Field(alias="Acks/sec")


class RenamedRecord(BaseModel):
    ack_count: float = Field(alias="Acks/sec")
    nacks_total: float = Field(alias="Nacks/sec")


class TestFieldBinding:
    """Record fields must correspond one to one with catalog entries"""

    def setup_method(self):
        self.catalog = Catalog("dhcp", PERF_OBJECT, [
            CounterDescriptor("Acks/sec", "acks_total", MetricType.COUNTER, "acks_total", "Acks"),
            CounterDescriptor("Nacks/sec", "nacks_total", MetricType.COUNTER, "nacks_total", "Nacks"),
        ])

    def test_missing_field(self):
        strategy = StructuredDecodeStrategy(self.catalog, PartialRecord)

        with pytest.raises(FieldBindingError, match="Nacks/sec"):
            strategy.open()

    def test_unbound_field(self):
        strategy = StructuredDecodeStrategy(Catalog("dhcp", PERF_OBJECT, []), PartialRecord)

        with pytest.raises(FieldBindingError, match="unbound"):
            strategy.open()

    def test_field_bound_to_other_counter(self):
        strategy = StructuredDecodeStrategy(self.catalog, MisboundRecord)

        with pytest.raises(FieldBindingError, match="acks_total"):
            strategy.open()

    def test_field_names_must_match_catalog(self):
        strategy = StructuredDecodeStrategy(self.catalog, RenamedRecord)

        with pytest.raises(FieldBindingError, match=r"missing fields \['acks_total'\], unbound fields \['ack_count'\]"):
            strategy.open()


class TestDirectLookupStrategy:
    """Test named counter lookup"""

    def test_open_requests_catalog_counters(self, fake_source):
        strategy = DirectLookupStrategy(DHCP_CATALOG, fake_source)
        strategy.open()

        assert fake_source.opened_with == (PERF_OBJECT, DHCP_CATALOG.identifiers)
        assert strategy.perf_objects == []
        assert strategy.name == "direct"

    def test_acquire_uses_first_value(self, counter_values):
        table = {EMPTY_INSTANCE: {name: CounterValues(value, 12345.0) for name, value in counter_values.items()}}
        strategy = DirectLookupStrategy(DHCP_CATALOG, FakePerfDataSource(table_result=table))
        strategy.open()

        samples = strategy.acquire(ScrapeContext())

        for identifier, value in counter_values.items():
            assert samples[identifier].value == value

    def test_missing_instance(self, counter_values):
        table = {"other": {name: CounterValues(value) for name, value in counter_values.items()}}
        strategy = DirectLookupStrategy(DHCP_CATALOG, FakePerfDataSource(table_result=table))
        strategy.open()

        with pytest.raises(InstanceNotFoundError, match="not found"):
            strategy.acquire(ScrapeContext())

    def test_missing_counter(self, counter_values):
        del counter_values["Releases/sec"]
        table = {EMPTY_INSTANCE: {name: CounterValues(value) for name, value in counter_values.items()}}
        strategy = DirectLookupStrategy(DHCP_CATALOG, FakePerfDataSource(table_result=table))
        strategy.open()

        with pytest.raises(InstanceNotFoundError, match="Releases/sec"):
            strategy.acquire(ScrapeContext())

    def test_table_error_propagates(self):
        source = FakePerfDataSource(table_result=CounterTableError("query failed"))
        strategy = DirectLookupStrategy(DHCP_CATALOG, source)
        strategy.open()

        with pytest.raises(CounterTableError, match="query failed"):
            strategy.acquire(ScrapeContext())

    def test_unexpected_error_wrapped(self):
        source = FakePerfDataSource(table_result=OSError("handle invalid"))
        strategy = DirectLookupStrategy(DHCP_CATALOG, source)
        strategy.open()

        with pytest.raises(PerfDataError, match="failed to collect DHCP Server metrics"):
            strategy.acquire(ScrapeContext())

    def test_acquire_before_open(self, fake_source):
        strategy = DirectLookupStrategy(DHCP_CATALOG, fake_source)

        with pytest.raises(PerfDataError, match="not open"):
            strategy.acquire(ScrapeContext())

    def test_close_releases_table(self, fake_source):
        strategy = DirectLookupStrategy(DHCP_CATALOG, fake_source)
        strategy.open()
        strategy.close()
        strategy.close()

        assert fake_source.tables[0].closed is True
