"""Counter acquisition strategies"""
from .base import (
    CollectionMethod,
    CollectionStrategy,
    RawSample,
    DEFAULT_COLLECTION_METHOD,
    parse_collection_method,
)
from .structured import StructuredDecodeStrategy, FieldBindingError
from .direct import DirectLookupStrategy

__all__ = [
    'CollectionMethod',
    'CollectionStrategy',
    'RawSample',
    'DEFAULT_COLLECTION_METHOD',
    'parse_collection_method',
    'StructuredDecodeStrategy',
    'FieldBindingError',
    'DirectLookupStrategy',
]
