"""DHCP Server performance counter collector"""
import threading
from typing import Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field
from .base import BaseCollector, CollectorInitError, CollectorStateError, ScrapeContext
from .strategies import (
    DEFAULT_COLLECTION_METHOD,
    CollectionMethod,
    CollectionStrategy,
    DirectLookupStrategy,
    FieldBindingError,
    StructuredDecodeStrategy,
    parse_collection_method,
)
from .translator import translate
from metrics.catalog import Catalog, CounterDescriptor, MetricDescriptor
from metrics.models import MetricType, MetricValue
from perfdata import PerfDataError, PerfDataSource
from logging_config import get_logger


logger = get_logger(__name__)

NAME = "dhcp"
PERF_OBJECT = "DHCP Server"
DEFAULT_NAMESPACE = "windows"

COUNTER = MetricType.COUNTER
GAUGE = MetricType.GAUGE

DHCP_CATALOG = Catalog(NAME, PERF_OBJECT, [
    CounterDescriptor("Packets Received/sec", "packets_received_total", COUNTER, "packets_received_total",
                      "Total number of packets received by the DHCP server (PacketsReceivedTotal)"),
    CounterDescriptor("Duplicates Dropped/sec", "duplicates_dropped_total", COUNTER, "duplicates_dropped_total",
                      "Total number of duplicate packets received by the DHCP server (DuplicatesDroppedTotal)"),
    CounterDescriptor("Packets Expired/sec", "packets_expired_total", COUNTER, "packets_expired_total",
                      "Total number of packets expired in the DHCP server message queue (PacketsExpiredTotal)"),
    CounterDescriptor("Active Queue Length", "active_queue_length", GAUGE, "active_queue_length",
                      "Number of packets in the processing queue of the DHCP server (ActiveQueueLength)"),
    CounterDescriptor("Conflict Check Queue Length", "conflict_check_queue_length", GAUGE, "conflict_check_queue_length",
                      "Number of packets in the DHCP server queue waiting on conflict detection (ping). (ConflictCheckQueueLength)"),
    CounterDescriptor("Discovers/sec", "discovers_total", COUNTER, "discovers_total",
                      "Total DHCP Discovers received by the DHCP server (DiscoversTotal)"),
    CounterDescriptor("Offers/sec", "offers_total", COUNTER, "offers_total",
                      "Total DHCP Offers sent by the DHCP server (OffersTotal)"),
    CounterDescriptor("Requests/sec", "requests_total", COUNTER, "requests_total",
                      "Total DHCP Requests received by the DHCP server (RequestsTotal)"),
    CounterDescriptor("Informs/sec", "informs_total", COUNTER, "informs_total",
                      "Total DHCP Informs received by the DHCP server (InformsTotal)"),
    CounterDescriptor("Acks/sec", "acks_total", COUNTER, "acks_total",
                      "Total DHCP Acks sent by the DHCP server (AcksTotal)"),
    CounterDescriptor("Nacks/sec", "nacks_total", COUNTER, "nacks_total",
                      "Total DHCP Nacks sent by the DHCP server (NacksTotal)"),
    CounterDescriptor("Declines/sec", "declines_total", COUNTER, "declines_total",
                      "Total DHCP Declines received by the DHCP server (DeclinesTotal)"),
    CounterDescriptor("Releases/sec", "releases_total", COUNTER, "releases_total",
                      "Total DHCP Releases received by the DHCP server (ReleasesTotal)"),
    CounterDescriptor("Offer Queue Length", "offer_queue_length", GAUGE, "offer_queue_length",
                      "Number of packets in the offer queue of the DHCP server (OfferQueueLength)"),
    CounterDescriptor("Denied due to match.", "denied_due_to_match_total", COUNTER, "denied_due_to_match",
                      "Total number of DHCP requests denied, based on matches from the Deny list (DeniedDueToMatch)"),
    CounterDescriptor("Denied due to nonmatch.", "denied_due_to_nonmatch_total", COUNTER, "denied_due_to_nonmatch",
                      "Total number of DHCP requests denied, based on non-matches from the Allow list (DeniedDueToNonMatch)"),
    CounterDescriptor("Failover: BndUpd sent/sec.", "failover_bndupd_sent_total", COUNTER, "failover_bndupd_sent_total",
                      "Number of DHCP fail over Binding Update messages sent (FailoverBndupdSentTotal)"),
    CounterDescriptor("Failover: BndUpd received/sec.", "failover_bndupd_received_total", COUNTER, "failover_bndupd_received_total",
                      "Number of DHCP fail over Binding Update messages received (FailoverBndupdReceivedTotal)"),
    CounterDescriptor("Failover: BndAck sent/sec.", "failover_bndack_sent_total", COUNTER, "failover_bndack_sent_total",
                      "Number of DHCP fail over Binding Ack messages sent (FailoverBndackSentTotal)"),
    CounterDescriptor("Failover: BndAck received/sec.", "failover_bndack_received_total", COUNTER, "failover_bndack_received_total",
                      "Number of DHCP fail over Binding Ack messages received (FailoverBndackReceivedTotal)"),
    CounterDescriptor("Failover: BndUpd pending in outbound queue.", "failover_bndupd_pending_in_outbound_queue", GAUGE,
                      "failover_bndupd_pending_outbound_queue",
                      "Number of pending outbound DHCP fail over Binding Update messages (FailoverBndupdPendingOutboundQueue)"),
    CounterDescriptor("Failover: Transitions to COMMUNICATION-INTERRUPTED state.",
                      "failover_transitions_communicationinterrupted_state_total", COUNTER,
                      "failover_transitions_communication_interrupted_state",
                      "Total number of transitions into COMMUNICATION INTERRUPTED state (FailoverTransitionsCommunicationinterruptedState)"),
    CounterDescriptor("Failover: Transitions to PARTNER-DOWN state.", "failover_transitions_partnerdown_state_total", COUNTER,
                      "failover_transitions_partner_down_state",
                      "Total number of transitions into PARTNER DOWN state (FailoverTransitionsPartnerdownState)"),
    CounterDescriptor("Failover: Transitions to RECOVER state.", "failover_transitions_recover_total", COUNTER,
                      "failover_transitions_recover_state",
                      "Total number of transitions into RECOVER state (FailoverTransitionsRecoverState)"),
    CounterDescriptor("Failover: BndUpd Dropped.", "failover_bndupd_dropped_total", COUNTER, "failover_bndupd_dropped",
                      "Total number of DHCP fail over Binding Updates dropped (FailoverBndupdDropped)"),
])


class DhcpPerf(BaseModel):
    """One instance record of the DHCP Server performance object"""
    model_config = ConfigDict(frozen=True)

    packets_received_total: float = Field(alias="Packets Received/sec")
    duplicates_dropped_total: float = Field(alias="Duplicates Dropped/sec")
    packets_expired_total: float = Field(alias="Packets Expired/sec")
    active_queue_length: float = Field(alias="Active Queue Length")
    conflict_check_queue_length: float = Field(alias="Conflict Check Queue Length")
    discovers_total: float = Field(alias="Discovers/sec")
    offers_total: float = Field(alias="Offers/sec")
    requests_total: float = Field(alias="Requests/sec")
    informs_total: float = Field(alias="Informs/sec")
    acks_total: float = Field(alias="Acks/sec")
    nacks_total: float = Field(alias="Nacks/sec")
    declines_total: float = Field(alias="Declines/sec")
    releases_total: float = Field(alias="Releases/sec")
    offer_queue_length: float = Field(alias="Offer Queue Length")
    denied_due_to_match: float = Field(alias="Denied due to match.")
    denied_due_to_nonmatch: float = Field(alias="Denied due to nonmatch.")
    failover_bndupd_sent_total: float = Field(alias="Failover: BndUpd sent/sec.")
    failover_bndupd_received_total: float = Field(alias="Failover: BndUpd received/sec.")
    failover_bndack_sent_total: float = Field(alias="Failover: BndAck sent/sec.")
    failover_bndack_received_total: float = Field(alias="Failover: BndAck received/sec.")
    failover_bndupd_pending_outbound_queue: float = Field(alias="Failover: BndUpd pending in outbound queue.")
    failover_transitions_communication_interrupted_state: float = Field(
        alias="Failover: Transitions to COMMUNICATION-INTERRUPTED state.")
    failover_transitions_partner_down_state: float = Field(alias="Failover: Transitions to PARTNER-DOWN state.")
    failover_transitions_recover_state: float = Field(alias="Failover: Transitions to RECOVER state.")
    failover_bndupd_dropped: float = Field(alias="Failover: BndUpd Dropped.")


class DhcpCollector(BaseCollector):
    """Collect DHCP Server counters through the configured acquisition method"""

    def __init__(self, config=None, source: Optional[PerfDataSource] = None):
        super().__init__(config, NAME, "DHCP Server performance counters")
        self.source = source
        self.catalog = DHCP_CATALOG
        self.descriptors: Dict[str, MetricDescriptor] = {}
        self.strategy: Optional[CollectionStrategy] = None
        self._lock = threading.Lock()

    def _resolve_method(self) -> CollectionMethod:
        configured = getattr(self.config, 'perf_counters_engine', None)
        method = parse_collection_method(configured)
        if method is None:
            if configured:
                logger.warning(
                    "Unrecognized counter engine, using default",
                    collector=self.name,
                    configured=configured,
                    default=DEFAULT_COLLECTION_METHOD.value,
                    event_type="config_fallback"
                )
            method = DEFAULT_COLLECTION_METHOD
        return method

    def _create_strategy(self, method: CollectionMethod) -> CollectionStrategy:
        if method == CollectionMethod.DIRECT:
            return DirectLookupStrategy(self.catalog, self._get_source())
        return StructuredDecodeStrategy(self.catalog, DhcpPerf)

    def _get_source(self) -> PerfDataSource:
        if self.source is None:
            from perfdata.file_source import DEFAULT_PERFDATA_DIR, FilePerfDataSource
            self.source = FilePerfDataSource(getattr(self.config, 'perfdata_dir', DEFAULT_PERFDATA_DIR))
        return self.source

    def build(self) -> None:
        """Select the acquisition strategy and create the metric descriptors"""
        if self.strategy is not None:
            raise CollectorStateError(f"collector '{self.name}' is already built")

        method = self._resolve_method()
        strategy = self._create_strategy(method)
        try:
            strategy.open()
        except (PerfDataError, FieldBindingError) as e:
            raise CollectorInitError(f"failed to create {PERF_OBJECT} collector: {e}") from e

        namespace = getattr(self.config, 'metrics_namespace', None) or DEFAULT_NAMESPACE
        self.descriptors = self.catalog.build_descriptors(namespace)
        self.strategy = strategy
        super().build()

        logger.info(
            "Collector built",
            collector=self.name,
            strategy=strategy.name,
            descriptors_count=len(self.descriptors),
            event_type="collector_build"
        )

    def get_perf_objects(self) -> List[str]:
        if self.strategy is None:
            return []
        return self.strategy.perf_objects

    def collect(self, ctx: ScrapeContext) -> List[MetricValue]:
        """Collect one sample per DHCP counter, or raise without emitting any"""
        self._require_built()
        with self._lock:
            samples = self.strategy.acquire(ctx)
        return list(translate(self.catalog, self.descriptors, samples))

    def close(self) -> None:
        with self._lock:
            if self.strategy is not None:
                self.strategy.close()
        super().close()
