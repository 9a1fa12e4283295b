"""FastAPI server setup and routes"""
import time
from typing import Optional
from fastapi import FastAPI, Response, HTTPException
from fastapi.responses import HTMLResponse
from config import Config
from metrics.registry import MetricsRegistry
from metrics.exporters.prometheus import PrometheusExporter
from perfdata import PerfDataSource
from logging_config import get_logger
from middleware.security import SecurityHeadersMiddleware, RequestLoggingMiddleware


logger = get_logger(__name__)


class MetricsServer:
    """FastAPI server exposing DHCP Server counters to Prometheus"""

    def __init__(self, config: Config, registry: Optional[MetricsRegistry] = None,
                 source: Optional[PerfDataSource] = None):
        self.config = config
        self.app = FastAPI(
            title="DHCP Metrics Exporter",
            version=config.service_version,
            docs_url=None,
            redoc_url=None,
            openapi_url=None
        )
        self.registry = registry or MetricsRegistry(config, source=source)
        self.exporter = PrometheusExporter()

        # Collector initialization failures propagate to the caller
        self.registry.build_all()

        self.start_time = time.time()
        self.scrape_count = 0
        self.last_scrape_time = 0.0

        self._setup_middleware()
        self._setup_routes()
        self._setup_events()

    def _setup_middleware(self):
        """Setup middleware; the last one added runs first"""
        if self.config.enable_request_logging:
            self.app.add_middleware(RequestLoggingMiddleware)

        self.app.add_middleware(
            SecurityHeadersMiddleware,
            trusted_hosts=self.config.trusted_hosts
        )

    def _setup_routes(self):
        """Setup FastAPI routes"""

        @self.app.get('/metrics', response_class=Response)
        async def get_metrics():
            """Run one scrape and serve it in Prometheus format"""
            metrics = await self.registry.collect_all_async()
            self.scrape_count += 1
            self.last_scrape_time = time.time()
            return Response(self.exporter.export_metrics(metrics), media_type=self.exporter.content_type)

        @self.app.get('/health')
        def health_check():
            """Health check endpoint"""
            collectors = self.registry.enabled_collectors()
            unbuilt = [collector.name for collector in collectors if not collector.is_built]

            health_data = {
                "status": "unhealthy" if unbuilt else "healthy",
                "uptime_seconds": round(time.time() - self.start_time, 1),
                "total_scrapes": self.scrape_count,
                "collectors": [collector.name for collector in collectors],
                "unbuilt_collectors": unbuilt,
            }

            if unbuilt:
                raise HTTPException(status_code=503, detail=health_data)

            return health_data

        @self.app.get('/collectors')
        def list_collectors():
            """List all available collectors"""
            return {
                "collectors": self.registry.get_collector_status(),
                "enabled_collectors": self.config.enabled_collectors
            }

        @self.app.get('/', response_class=HTMLResponse)
        def index():
            """Web interface"""
            return self._generate_html_interface()

    def _setup_events(self):
        """Setup FastAPI shutdown event"""

        @self.app.on_event("shutdown")
        async def shutdown_event():
            logger.info("Shutting down metrics exporter", event_type="server_shutdown")
            self.registry.cleanup()

    def _generate_html_interface(self) -> str:
        """Generate HTML interface"""
        collectors_status = self.registry.get_collector_status()
        rows = ''.join(
            f'<li><strong>{name}:</strong> {info["state"]}'
            f'{" (" + info["strategy"] + ")" if "strategy" in info else ""} - {info["help"]}</li>'
            for name, info in collectors_status.items()
        )

        return f"""
        <!DOCTYPE html>
        <html>
        <head><title>DHCP Metrics Exporter</title></head>
        <body>
            <h1>DHCP Metrics Exporter</h1>
            <ul>
                <li><a href="/metrics">/metrics</a> - Prometheus metrics</li>
                <li><a href="/health">/health</a> - Health check</li>
                <li><a href="/collectors">/collectors</a> - Collector information</li>
            </ul>
            <h2>Collectors</h2>
            <ul>{rows}</ul>
        </body>
        </html>
        """

    def get_app(self) -> FastAPI:
        """Get the FastAPI application"""
        return self.app
