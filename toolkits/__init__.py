"""Public package exports for ``toolkits``.

The heart of the package is :class:`Collection`, an ordered key/value container
whose operations return new collections. The key-path helpers it is built on are
available as :mod:`toolkits.arr`, text splitting as :mod:`toolkits.strings`,
decimal string arithmetic as :class:`BC` and host information as :class:`Sys`.
"""

from . import arr, strings
from .bc import BC
from .collection import Collection, CollectionConfig, SourceKind
from .errors import InvalidArgumentError, ToolkitsError
from .functions import collect, sum_distance
from .system import Sys

__all__ = [
    "arr",
    "strings",
    "BC",
    "Collection",
    "CollectionConfig",
    "SourceKind",
    "InvalidArgumentError",
    "ToolkitsError",
    "collect",
    "sum_distance",
    "Sys",
]
