"""Performance counter access: snapshot decoding and handle-based counter tables"""
from .errors import (
    PerfDataError,
    PerfDataDecodeError,
    PerfObjectNotFoundError,
    InstanceNotFoundError,
    CounterTableError,
    PerfDataReadError,
)
from .models import CounterValues, PerfInstance, PerfObject, EMPTY_INSTANCE
from .source import PerfDataSource, CounterTable
from .unmarshal import unmarshal_object, record_counter_names

__all__ = [
    'PerfDataError',
    'PerfDataDecodeError',
    'PerfObjectNotFoundError',
    'InstanceNotFoundError',
    'CounterTableError',
    'PerfDataReadError',
    'CounterValues',
    'PerfInstance',
    'PerfObject',
    'EMPTY_INSTANCE',
    'PerfDataSource',
    'CounterTable',
    'unmarshal_object',
    'record_counter_names',
]
