"""Decoding of performance object snapshots into typed per-instance records"""
from typing import Dict, Set, Type, TypeVar
from pydantic import BaseModel, ValidationError
from .errors import PerfDataDecodeError
from .models import PerfObject

RecordT = TypeVar("RecordT", bound=BaseModel)


def record_counter_names(record_type: Type[BaseModel]) -> Set[str]:
    """Counter names a record type binds, taken from its field aliases"""
    return {field.alias or name for name, field in record_type.model_fields.items()}


def unmarshal_object(blob: bytes, record_type: Type[RecordT]) -> Dict[str, RecordT]:
    """Decode a snapshot blob into one record per instance, keyed by instance name.

    Instances are keyed as ``PerfObject.keyed_instances`` does, so the sole
    instance of a single-instance object is found under EMPTY_INSTANCE. Every
    field of ``record_type`` must declare the counter name it is read from as
    its alias. A counter missing from an instance, or a value that is not
    numeric, fails the whole decode.
    """
    if blob is None:
        raise PerfDataDecodeError("snapshot blob is empty")

    try:
        perf_object = PerfObject.model_validate_json(blob)
    except ValidationError as e:
        raise PerfDataDecodeError(f"malformed performance object snapshot: {e}") from e

    records = {}
    for key, instance in perf_object.keyed_instances().items():
        try:
            records[key] = record_type.model_validate(instance.counters)
        except ValidationError as e:
            raise PerfDataDecodeError(
                f"instance '{instance.name}' of '{perf_object.name}' "
                f"does not match {record_type.__name__}: {e}"
            ) from e

    return records
