"""File-backed performance counter source reading JSON counter dumps"""
import threading
from pathlib import Path
from typing import Dict, List
from pydantic import ValidationError
from .errors import CounterTableError, PerfDataReadError, PerfObjectNotFoundError
from .models import CounterValues, PerfObject
from .source import CounterTable, PerfDataSource
from logging_config import get_logger


logger = get_logger(__name__)

DEFAULT_PERFDATA_DIR = Path("/opt/dhcp-metrics-exporter/perfdata")


class FileCounterTable(CounterTable):
    """Counter table that re-reads the object's dump file on every collect"""

    def __init__(self, path: Path, object_name: str, counters: List[str]):
        self.path = path
        self.object_name = object_name
        self.counters = list(counters)
        self._closed = False
        self._lock = threading.Lock()

    def collect(self) -> Dict[str, Dict[str, CounterValues]]:
        with self._lock:
            if self._closed:
                raise CounterTableError(f"counter table for '{self.object_name}' is closed")

            try:
                perf_object = PerfObject.model_validate_json(self.path.read_bytes())
            except FileNotFoundError:
                return {}
            except (OSError, ValidationError) as e:
                raise CounterTableError(f"failed to query '{self.object_name}': {e}") from e

        wanted = set(self.counters)
        return {
            instance: {name: values for name, values in counters.items() if name in wanted}
            for instance, counters in perf_object.to_counter_table().items()
        }

    def close(self) -> None:
        with self._lock:
            self._closed = True


class FilePerfDataSource(PerfDataSource):
    """Reads ``<directory>/<object name>.json`` dumps exported from the host"""

    def __init__(self, directory: Path):
        self.directory = Path(directory)

    def _object_path(self, object_name: str) -> Path:
        return self.directory / f"{object_name}.json"

    def get_object_snapshot(self, object_name: str) -> bytes:
        path = self._object_path(object_name)
        try:
            return path.read_bytes()
        except FileNotFoundError as e:
            raise PerfObjectNotFoundError(object_name, f"no snapshot at {path}") from e
        except OSError as e:
            raise PerfDataReadError(object_name, str(e)) from e

    def open_counter_table(self, object_name: str, counters: List[str]) -> CounterTable:
        if not self.directory.is_dir():
            raise CounterTableError(f"performance data directory {self.directory} does not exist")

        logger.debug(
            "Opened counter table",
            object_name=object_name,
            counters_count=len(counters),
            event_type="counter_table_open"
        )
        return FileCounterTable(self._object_path(object_name), object_name, counters)
