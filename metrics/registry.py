"""Metrics registry for managing collectors and orchestrating collection"""
import asyncio
import importlib
import pkgutil
import time
from dataclasses import dataclass, field
from typing import Dict, List, Optional
from .catalog import build_fq_name
from .models import MetricType, MetricValue
from collectors.base import BaseCollector, ScrapeContext
from perfdata import PerfDataError, PerfDataSource
from logging_config import get_logger, log_scrape


logger = get_logger(__name__)


@dataclass
class CollectorScrape:
    """Outcome of one collector's part of a scrape"""
    name: str
    success: bool
    duration: float
    metrics: List[MetricValue] = field(default_factory=list)
    error: Optional[str] = None


class MetricsRegistry:
    """Central registry for all metric collectors"""

    def __init__(self, config=None, source: Optional[PerfDataSource] = None, auto_discover: bool = True):
        self.config = config
        self.source = source or self._create_source()
        self.collectors: Dict[str, BaseCollector] = {}
        self.last_scrapes: Dict[str, CollectorScrape] = {}
        if auto_discover:
            self.auto_discover_collectors()

    def _create_source(self) -> PerfDataSource:
        from perfdata.file_source import DEFAULT_PERFDATA_DIR, FilePerfDataSource
        return FilePerfDataSource(getattr(self.config, 'perfdata_dir', DEFAULT_PERFDATA_DIR))

    @property
    def namespace(self) -> str:
        return getattr(self.config, 'metrics_namespace', None) or "windows"

    def auto_discover_collectors(self):
        """Automatically discover and register collectors"""
        import collectors

        # Get all modules in the collectors package
        for importer, modname, ispkg in pkgutil.iter_modules(collectors.__path__, collectors.__name__ + "."):
            if ispkg or modname.endswith('.base'):
                continue

            try:
                module = importlib.import_module(modname)
            except ImportError as e:
                logger.error("Failed to load collector module", module=modname, error=str(e))
                continue

            # Look for collector classes defined in the module
            for attr_name in dir(module):
                attr = getattr(module, attr_name)
                if (isinstance(attr, type) and
                        issubclass(attr, BaseCollector) and
                        attr is not BaseCollector and
                        attr.__module__ == module.__name__):
                    collector = attr(self.config, source=self.source)
                    self.register_collector(collector)

    def register_collector(self, collector: BaseCollector):
        """Register a new collector"""
        if not isinstance(collector, BaseCollector):
            raise ValueError("Collector must inherit from BaseCollector")

        self.collectors[collector.name] = collector
        logger.info("Registered collector", collector=collector.name, event_type="collector_registered")

    def get_collector(self, name: str) -> Optional[BaseCollector]:
        """Get collector by name"""
        return self.collectors.get(name)

    def list_collectors(self) -> List[str]:
        """List all registered collector names"""
        return list(self.collectors.keys())

    def enabled_collectors(self) -> List[BaseCollector]:
        return [collector for collector in self.collectors.values() if collector.is_enabled()]

    def build_all(self) -> None:
        """Build every enabled collector; the first failure aborts startup"""
        for collector in self.enabled_collectors():
            collector.build()

    def build_scrape_context(self, collectors: List[BaseCollector]) -> ScrapeContext:
        """Snapshot each performance object the given collectors need, once"""
        perf_objects = {}
        errors = {}
        names = sorted({name for collector in collectors for name in collector.get_perf_objects()})
        for name in names:
            try:
                perf_objects[name] = self.source.get_object_snapshot(name)
            except PerfDataError as e:
                logger.warning("Performance object unavailable", perf_object=name, error=str(e),
                               event_type="perf_object_missing")
                errors[name] = e
        return ScrapeContext(perf_objects, errors)

    def _active_collectors(self) -> List[BaseCollector]:
        return [collector for collector in self.enabled_collectors() if collector.is_built]

    def collect_all(self) -> List[MetricValue]:
        """Collect metrics from all enabled collectors (synchronous)"""
        active = self._active_collectors()
        ctx = self.build_scrape_context(active)
        results = [self._collect_single(collector, ctx) for collector in active]
        return self._flatten(results)

    async def collect_all_async(self) -> List[MetricValue]:
        """Collect metrics from all enabled collectors concurrently"""
        active = self._active_collectors()
        if not active:
            return []

        loop = asyncio.get_running_loop()
        ctx = await loop.run_in_executor(None, self.build_scrape_context, active)
        results = await asyncio.gather(*[self._collect_single_async(collector, ctx) for collector in active])
        return self._flatten(list(results))

    def _collect_single(self, collector: BaseCollector, ctx: ScrapeContext) -> CollectorScrape:
        start_time = time.perf_counter()
        try:
            metrics = collector.collect(ctx)
        except Exception as e:
            return self._failed(collector, start_time, e)
        return self._succeeded(collector, start_time, metrics)

    async def _collect_single_async(self, collector: BaseCollector, ctx: ScrapeContext) -> CollectorScrape:
        start_time = time.perf_counter()
        timeout = getattr(self.config, 'scrape_timeout_seconds', None)
        try:
            metrics = await asyncio.wait_for(collector.collect_async(ctx), timeout)
        except asyncio.TimeoutError:
            return self._failed(collector, start_time, TimeoutError(f"collector timed out after {timeout}s"))
        except Exception as e:
            return self._failed(collector, start_time, e)
        return self._succeeded(collector, start_time, metrics)

    def _succeeded(self, collector: BaseCollector, start_time: float, metrics: List[MetricValue]) -> CollectorScrape:
        duration = time.perf_counter() - start_time
        log_scrape(logger, collector.name, len(metrics), duration, success=True)
        return CollectorScrape(collector.name, True, duration, metrics)

    def _failed(self, collector: BaseCollector, start_time: float, error: Exception) -> CollectorScrape:
        duration = time.perf_counter() - start_time
        logger.error(
            "Collector failed",
            collector=collector.name,
            error=str(error),
            error_type=type(error).__name__,
            duration_seconds=round(duration, 3),
            event_type="collection_error"
        )
        return CollectorScrape(collector.name, False, duration, error=str(error))

    def _flatten(self, results: List[CollectorScrape]) -> List[MetricValue]:
        """Join collector samples and append per-collector status samples"""
        all_metrics = []
        for result in results:
            self.last_scrapes[result.name] = result
            all_metrics.extend(result.metrics)

        duration_name = build_fq_name(self.namespace, "exporter", "collector_duration_seconds")
        success_name = build_fq_name(self.namespace, "exporter", "collector_success")
        for result in results:
            all_metrics.append(MetricValue(
                name=duration_name,
                value=result.duration,
                help_text="Duration of a collection.",
                metric_type=MetricType.GAUGE,
                labels={"collector": result.name},
            ))
            all_metrics.append(MetricValue(
                name=success_name,
                value=1.0 if result.success else 0.0,
                help_text="Whether the collector was successful.",
                metric_type=MetricType.GAUGE,
                labels={"collector": result.name},
            ))
        return all_metrics

    def get_collector_status(self) -> Dict[str, Dict]:
        """Get status information for all collectors"""
        status = {}

        for name, collector in self.collectors.items():
            info = {
                "enabled": collector.is_enabled(),
                "state": collector.state.value,
                "class": collector.__class__.__name__,
                "help": collector.help_text,
                "perf_objects": collector.get_perf_objects(),
            }
            strategy = getattr(collector, 'strategy', None)
            if strategy is not None:
                info["strategy"] = strategy.name
            last = self.last_scrapes.get(name)
            if last is not None:
                info["last_scrape"] = {
                    "success": last.success,
                    "duration_seconds": round(last.duration, 3),
                    "error": last.error,
                }
            status[name] = info

        return status

    def cleanup(self):
        """Close all collectors"""
        for collector in self.collectors.values():
            try:
                collector.close()
            except Exception as e:
                logger.error("Failed to close collector", collector=collector.name, error=str(e))
