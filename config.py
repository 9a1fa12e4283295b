"""Configuration management for the DHCP metrics exporter"""
from pathlib import Path
from typing import Annotated, List, Literal, Optional
from pydantic import Field, validator
from pydantic_settings import BaseSettings, NoDecode


class Config(BaseSettings):
    """Configuration class with Pydantic validation and environment-based settings"""

    # Counter acquisition
    perf_counters_engine: str = Field(default="legacy", description="Counter engine: legacy (snapshot decode) or direct (named counter lookup)")
    perfdata_dir: Path = Field(default=Path("/opt/dhcp-metrics-exporter/perfdata"), description="Directory holding performance object dumps")

    # Server settings
    metrics_port: int = Field(default=9182, ge=1, le=65535, description="Metrics server port")
    metrics_host: str = Field(default="0.0.0.0", description="Metrics server host")
    metrics_namespace: str = Field(default="windows", description="Namespace prefix of exported metric names")
    scrape_timeout_seconds: float = Field(default=10.0, gt=0, description="Upper bound for one scrape")

    # Collector settings
    enabled_collectors: Annotated[List[str], NoDecode] = Field(default=["dhcp"], description="List of enabled collectors")

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(default="INFO", description="Log level")
    log_format: Literal["json", "console"] = Field(default="json", description="Log renderer")
    log_file: Optional[Path] = Field(default=None, description="Log file path")

    # Service settings
    service_name: str = Field(default="dhcp-metrics-exporter", description="Service name")
    service_version: str = Field(default="1.0.0", description="Service version")

    # Security settings
    trusted_hosts: Annotated[List[str], NoDecode] = Field(default_factory=list, description="List of trusted hosts")
    enable_request_logging: bool = Field(default=True, description="Enable HTTP request logging")

    class Config:
        env_prefix = ""
        case_sensitive = False

    @validator('log_level', pre=True)
    def normalize_log_level(cls, v):
        """Accept log levels in any case"""
        return v.upper() if isinstance(v, str) else v

    @validator('log_format', pre=True)
    def normalize_log_format(cls, v):
        return v.lower() if isinstance(v, str) else v

    @validator('log_file')
    def ensure_parent_directories(cls, v):
        """Ensure parent directories exist for file paths"""
        if isinstance(v, Path):
            v.parent.mkdir(parents=True, exist_ok=True)
        return v

    @validator('enabled_collectors', 'trusted_hosts', pre=True)
    def parse_comma_separated(cls, v):
        """Parse comma-separated lists"""
        if isinstance(v, str):
            return [item.strip() for item in v.split(',') if item.strip()]
        return v or []

    def is_collector_enabled(self, collector_name: str) -> bool:
        """Check if a specific collector is enabled"""
        return collector_name in self.enabled_collectors
