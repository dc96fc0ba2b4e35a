"""Turning arbitrary source values into the ordered dict behind a Collection.

Every source is first classified into one SourceKind, then handed to the
converter registered for that kind. Each converter is total: unrecognized
input degrades to an empty dict instead of raising.
"""

import dataclasses
import json
import logging
from collections.abc import Iterable, Mapping
from enum import Enum
from typing import Any, Callable, Dict

from .. import strings
from ..arr import Key
from ._collection_meta import CollectionConfig, CollectionMeta

logger = logging.getLogger(__name__)


class SourceKind(Enum):
    COLLECTION = "collection"
    MAPPING = "mapping"
    SERIALIZABLE = "serializable"
    TEXT = "text"
    ITERABLE = "iterable"
    OTHER = "other"


def _is_serializable(source:Any)->bool:
    if dataclasses.is_dataclass(source):
        return True
    return callable(getattr(source,'to_dict',None)) or callable(getattr(source,'_asdict',None))

def classify(source:Any)->SourceKind:
    """Return the kind of source, first match wins.

    Text is tested before iterables since str and bytes are iterable.
    Classes themselves are never unpacked.
    """
    if isinstance(source,type):
        return SourceKind.OTHER
    if isinstance(type(source),CollectionMeta):
        return SourceKind.COLLECTION
    if isinstance(source,Mapping):
        return SourceKind.MAPPING
    if _is_serializable(source):
        return SourceKind.SERIALIZABLE
    if isinstance(source,(str,bytes,bytearray)):
        return SourceKind.TEXT
    if isinstance(source,Iterable):
        return SourceKind.ITERABLE
    return SourceKind.OTHER

def _from_collection(source, config:CollectionConfig)->Dict[Key,Any]:
    return source.all()

def _from_mapping(source:Mapping, config:CollectionConfig)->Dict[Key,Any]:
    return dict(source.items())

def _from_serializable(source, config:CollectionConfig)->Dict[Key,Any]:
    if dataclasses.is_dataclass(source):
        data=dataclasses.asdict(source)
    elif callable(getattr(source,'to_dict',None)):
        data=source.to_dict()
    else:
        data=source._asdict()
    return to_items(data,config)

def _from_iterable(source:Iterable, config:CollectionConfig)->Dict[Key,Any]:
    return dict(enumerate(source))

def _from_text(source, config:CollectionConfig)->Dict[Key,Any]:
    text=source if isinstance(source,str) else bytes(source).decode('utf-8',errors='replace')
    try:
        decoded=json.loads(text)
    except ValueError:
        logger.debug("Text source is not JSON, splitting it on %r", config.string_pattern)
        return dict(enumerate(strings.as_array(text,config.string_pattern)))
    if isinstance(decoded,(dict,list)):
        return to_items(decoded,config)
    return {0:text}

def _from_other(source, config:CollectionConfig)->Dict[Key,Any]:
    if source is not None:
        logger.debug("Unsupported collection source of type %s, using an empty collection", type(source).__name__)
    return {}

_CONVERTERS:Dict[SourceKind,Callable[[Any,CollectionConfig],Dict[Key,Any]]]={
    SourceKind.COLLECTION:_from_collection,
    SourceKind.MAPPING:_from_mapping,
    SourceKind.SERIALIZABLE:_from_serializable,
    SourceKind.TEXT:_from_text,
    SourceKind.ITERABLE:_from_iterable,
    SourceKind.OTHER:_from_other,
}

def to_items(source:Any, config:CollectionConfig)->Dict[Key,Any]:
    """Coerce source into a fresh ordered dict according to its SourceKind.

    Examples:
        >>> to_items(["a", "b"], CollectionConfig())
        {0: 'a', 1: 'b'}
        >>> to_items('{"x": 1}', CollectionConfig())
        {'x': 1}
        >>> to_items("red, green", CollectionConfig())
        {0: 'red', 1: 'green'}
        >>> to_items(42, CollectionConfig())
        {}
    """
    return _CONVERTERS[classify(source)](source,config)
