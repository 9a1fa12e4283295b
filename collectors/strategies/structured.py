"""Structured-decode strategy: snapshot blobs decoded into typed records"""
import logging
from typing import Dict, Type
from pydantic import BaseModel
from .base import CollectionMethod, CollectionStrategy, RawSample
from perfdata import (
    EMPTY_INSTANCE,
    InstanceNotFoundError,
    PerfObjectNotFoundError,
    record_counter_names,
    unmarshal_object,
)

logger = logging.getLogger(__name__)


class FieldBindingError(ValueError):
    """Record fields and catalog entries do not correspond one to one"""


class StructuredDecodeStrategy(CollectionStrategy):
    """Decode the performance object snapshot supplied with each scrape"""

    method = CollectionMethod.LEGACY

    def __init__(self, catalog, record_type: Type[BaseModel]):
        super().__init__(catalog)
        self.record_type = record_type
        self._bindings: Dict[str, str] = {}

    @property
    def perf_objects(self):
        return [self.catalog.object_name]

    def open(self) -> None:
        self._bindings = self._bind_fields()

    def _bind_fields(self) -> Dict[str, str]:
        """Map every counter identifier to the record attribute it is read from"""
        fields = self.record_type.model_fields
        record_counters = record_counter_names(self.record_type)
        catalog_counters = set(self.catalog.identifiers)

        missing = catalog_counters - record_counters
        unbound = record_counters - catalog_counters
        if missing or unbound:
            raise FieldBindingError(
                f"{self.record_type.__name__} does not match the {self.catalog.subsystem} catalog: "
                f"missing counters {sorted(missing)}, unbound counters {sorted(unbound)}"
            )

        missing_fields = set(self.catalog.field_names) - set(fields)
        unbound_fields = set(fields) - set(self.catalog.field_names)
        if missing_fields or unbound_fields:
            raise FieldBindingError(
                f"{self.record_type.__name__} does not match the {self.catalog.subsystem} catalog: "
                f"missing fields {sorted(missing_fields)}, unbound fields {sorted(unbound_fields)}"
            )

        bindings = {}
        for entry in self.catalog:
            field = fields.get(entry.field_name)
            if field is None or (field.alias or entry.field_name) != entry.identifier:
                raise FieldBindingError(
                    f"{self.record_type.__name__}.{entry.field_name} is not bound to counter '{entry.identifier}'"
                )
            bindings[entry.identifier] = entry.field_name

        logger.debug(f"Bound {len(bindings)} {self.record_type.__name__} fields to counters")
        return bindings

    def acquire(self, ctx) -> Dict[str, RawSample]:
        blob = ctx.get_perf_object(self.catalog.object_name)
        records = unmarshal_object(blob, self.record_type)
        if not records:
            raise PerfObjectNotFoundError(self.catalog.object_name)

        record = records.get(EMPTY_INSTANCE)
        if record is None:
            raise InstanceNotFoundError(self.catalog.object_name, EMPTY_INSTANCE)

        return {
            identifier: RawSample(identifier=identifier, value=float(getattr(record, field_name)))
            for identifier, field_name in self._bindings.items()
        }
