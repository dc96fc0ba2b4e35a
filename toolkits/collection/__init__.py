from ._collection import Collection
from ._collection_meta import CollectionConfig, CollectionMeta
from ._sources import SourceKind, classify, to_items

__all__ = ["Collection", "CollectionConfig", "CollectionMeta", "SourceKind", "classify", "to_items"]
