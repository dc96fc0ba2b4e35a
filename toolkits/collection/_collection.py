import json
import logging
import math
from functools import cmp_to_key
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple

from .. import arr
from ..arr import Key, Path
from ..errors import InvalidArgumentError
from ._collection_meta import CollectionConfig, CollectionMeta
from ._sources import to_items

logger = logging.getLogger(__name__)

Comparator = Callable[[Any, Any], int]
Callback = Callable[[Any, Key], Any]


def _key_list(keys:Tuple[Any,...])->List[Any]:
    # accepts f("a", "b") as well as f(["a", "b"])
    if len(keys)==1 and (arr.is_collection(keys[0]) or isinstance(keys[0],(list,tuple,set,frozenset))):
        return arr.wrap(keys[0])
    return list(keys)

def _stringify(value:Any)->str:
    return '' if value is None else str(value)

def _sort_key_order(key:Key):
    # integer keys first, then string keys
    return (isinstance(key,str),key)

def _value_order(value:Any):
    # None sorts after every other value
    return (value is None,value)


class Collection(metaclass=CollectionMeta):
    """
    An ordered key -> value container with a value-style operation algebra.

    Keys are ints or strings and keep their insertion order. Almost every operation
    returns a new collection and leaves the original untouched. The mutating ones
    (push, pop, put, forget, shift, clear, prepend, transform, splice, append and
    item assignment) act on the instance itself and return it for chaining when
    they do not return a removed value.

    Features:
        - total construction from lists, dicts, collections, dataclasses, JSON or plain text
        - set algebra: diff, intersect, merge, replace, union and their key/recursive variants
        - dotted-path access: get, pull, pluck, except_, undot
        - ordering and partitioning: sort, reverse, shuffle, nth, slice, splice, chunk, split
        - class-level configuration through Collection.config()

    Iterating a collection yields its values; `key in collection` tests keys.
    Mutating a collection while iterating over it is the caller's responsibility.

    Example:
        >>> c = Collection({"a": 1, "b": 2})
        >>> c.map(lambda value, key: value * 10).all()
        {'a': 10, 'b': 20}
        >>> Collection.range(1, 5).nth(2).to_list()
        [1, 3, 5]
        >>> Collection([1, 2, 3]).join(", ", " and ")
        '1, 2 and 3'
    """

    @classmethod
    def config(cls, **kwargs) -> CollectionConfig:
        """
        Class method to create a CollectionConfig for use in Collection subclasses.

        Usage:
            class Tags(Collection):
                _config = Collection.config(string_pattern=r"[;|]+", json_indent=2)

        Args:
            string_pattern: Delimiter regex used when coercing plain text
            json_indent: Default indent of to_json()
            json_ensure_ascii: Default ensure_ascii of to_json()
            json_sort_keys: Default sort_keys of to_json()

        Returns:
            CollectionConfig instance
        """
        return CollectionConfig(**kwargs)

    def __init__(self, items:Any=None):
        self._items:Dict[Key,Any]=to_items(items,self._config)

    @classmethod
    def make(cls, items:Any=None) -> "Collection":
        return cls(items)

    @classmethod
    def range(cls, start:int, end:int, step:int=1) -> "Collection":
        """Collection of the integers from start to end inclusive, counting down if start > end."""
        if step==0:
            raise InvalidArgumentError("range() step cannot be zero")
        step=abs(step)
        if start<=end:
            return cls(range(start,end+1,step))
        return cls(range(start,end-1,-step))

    def _new(self, items:Any=None) -> "Collection":
        return type(self)(items)

    def _coerce(self, items:Any) -> Dict[Key,Any]:
        return to_items(items,self._config)

    # export

    def all(self) -> Dict[Key,Any]:
        """Return the items as a plain dict (a copy)."""
        return dict(self._items)

    def to_list(self) -> List[Any]:
        return list(self._items.values())

    def keys(self) -> "Collection":
        return self._new(list(self._items.keys()))

    def values(self) -> "Collection":
        return self._new(list(self._items.values()))

    def items(self) -> Iterator[Tuple[Key,Any]]:
        return iter(list(self._items.items()))

    def to_base(self) -> "Collection":
        """Copy into a plain Collection, dropping any subclass."""
        return Collection(self)

    def _jsonable(self, obj:Any) -> Any:
        """JSON-ready form of a collection: a list when sequentially keyed, else a dict with str keys."""
        if not isinstance(obj,Collection):
            raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")
        items=obj._items
        if arr.is_list(items):
            return list(items.values())
        result={}
        for k,v in items.items():
            name=str(k)
            if name in result:
                logger.warning("Key %r collides with an earlier key as JSON key %r, the later value is kept", k, name)
            result[name]=v
        return result

    def to_json(self, **kwargs) -> str:
        """
        Return a JSON string of the items.

        Sequentially keyed collections become JSON arrays, the others JSON objects
        with string keys.
        Defaults for indent, ensure_ascii and sort_keys come from the class config;
        any keyword accepted by json.dumps() overrides them.
        """
        options=dict(
            indent=self._config.json_indent,
            ensure_ascii=self._config.json_ensure_ascii,
            sort_keys=self._config.json_sort_keys,
            default=self._jsonable,
        )
        options.update(kwargs)
        return json.dumps(self._jsonable(self),**options)

    # set algebra

    def diff(self, items:Any) -> "Collection":
        """Items whose value is not present among the values of items."""
        other=list(self._coerce(items).values())
        return self._new({k:v for k,v in self._items.items() if v not in other})

    def diff_using(self, items:Any, callback:Comparator) -> "Collection":
        """Like diff(), values are equal when callback(a, b) == 0."""
        other=list(self._coerce(items).values())
        return self._new({k:v for k,v in self._items.items() if not any(callback(v,o)==0 for o in other)})

    def diff_assoc(self, items:Any) -> "Collection":
        """Items whose key/value pair does not appear in items."""
        other=self._coerce(items)
        return self._new({k:v for k,v in self._items.items() if k not in other or other[k]!=v})

    def diff_assoc_using(self, items:Any, callback:Comparator) -> "Collection":
        """Like diff_assoc(), keys are equal when callback(a, b) == 0."""
        other=self._coerce(items)
        return self._new({
            k:v for k,v in self._items.items()
            if not any(callback(k,ok)==0 and ov==v for ok,ov in other.items())
        })

    def diff_keys(self, items:Any) -> "Collection":
        """Items whose key is absent from items."""
        other=self._coerce(items)
        return self._new({k:v for k,v in self._items.items() if k not in other})

    def diff_keys_using(self, items:Any, callback:Comparator) -> "Collection":
        other=list(self._coerce(items).keys())
        return self._new({k:v for k,v in self._items.items() if not any(callback(k,ok)==0 for ok in other)})

    def intersect(self, items:Any) -> "Collection":
        """Items whose value is present among the values of items."""
        other=list(self._coerce(items).values())
        return self._new({k:v for k,v in self._items.items() if v in other})

    def intersect_by_keys(self, items:Any) -> "Collection":
        other=self._coerce(items)
        return self._new({k:v for k,v in self._items.items() if k in other})

    def merge(self, items:Any) -> "Collection":
        """
        Merge items into a new collection.

        String keys of items overwrite ours in place. Integer keys on both sides
        are renumbered, the ones of items appended after ours.
        """
        return self._new(arr.merge(self._items,self._coerce(items)))

    def merge_recursive(self, items:Any) -> "Collection":
        """Like merge(), but containers found on both sides of a string key are merged too."""
        return self._new(arr.merge_recursive(self._items,self._coerce(items)))

    def replace(self, items:Any) -> "Collection":
        """Overwrite every key present in items (integer keys included), append the new ones."""
        return self._new(arr.replace(self._items,self._coerce(items)))

    def replace_recursive(self, items:Any) -> "Collection":
        return self._new(arr.replace_recursive(self._items,self._coerce(items)))

    def union(self, items:Any) -> "Collection":
        """Add the entries of items whose key we do not have. Our values win on collisions."""
        result=dict(self._items)
        for k,v in self._coerce(items).items():
            result.setdefault(k,v)
        return self._new(result)

    def combine(self, values:Any) -> "Collection":
        """
        Use our values as keys for the values of another source.

        Raises:
            InvalidArgumentError: If both sides do not hold the same number of values
        """
        keys=list(self._items.values())
        other=list(self._coerce(values).values())
        if len(keys)!=len(other):
            raise InvalidArgumentError(
                f"Cannot combine {len(keys)} keys with {len(other)} values, both sides must have the same length."
            )
        return self._new(dict(zip(keys,other)))

    def only(self, *keys) -> "Collection":
        if len(keys)==1 and keys[0] is None:
            return self._new(self._items)
        return self._new(arr.only(self._items,_key_list(keys)))

    def except_(self, *keys) -> "Collection":
        """Copy without the given keys. Dotted paths remove nested keys."""
        return self._new(arr.except_(self._items,_key_list(keys)))

    # access

    def get(self, key:Path, default:Any=None) -> Any:
        """Value stored under a key or dotted path, or default if there is none."""
        return arr.get(self._items,key,default)

    def first(self, callback:Optional[Callback]=None, default:Any=None) -> Any:
        return arr.first(self._items,callback,default)

    def last(self, callback:Optional[Callback]=None, default:Any=None) -> Any:
        return arr.last(self._items,callback,default)

    def get_or_put(self, key:Key, value:Any) -> Any:
        """Return the value under key, storing value there first if the key is missing."""
        if key in self._items:
            return self._items[key]
        self[key]=value
        return value

    def has(self, *keys) -> bool:
        """True if every given key exists."""
        return all(key in self._items for key in _key_list(keys))

    def has_any(self, *keys) -> bool:
        """True if at least one of the given keys exists. Always False when empty."""
        if self.is_empty():
            return False
        return any(key in self._items for key in _key_list(keys))

    def pull(self, key:Path, default:Any=None) -> Any:
        """Remove the value under a key or dotted path and return it, or default."""
        return arr.pull(self._items,key,default)

    def search_value(self, value:Any, strict:bool=False) -> Optional[Key]:
        """
        Key of the first item equal to value, or None.

        With strict=True the types must match too (1 does not find 1.0 or True).
        """
        for k,v in self._items.items():
            if v==value and (not strict or type(v) is type(value)):
                return k
        return None

    def search_by(self, predicate:Callable[[Any,Key],bool]) -> Optional[Key]:
        """Key of the first item for which predicate(value, key) is true, or None."""
        for k,v in self._items.items():
            if predicate(v,k):
                return k
        return None

    def search(self, value:Any, strict:bool=False) -> Optional[Key]:
        return self.search_value(value,strict)

    # mutation

    def put(self, key:Optional[Key], value:Any) -> "Collection":
        self[key]=value
        return self

    def push(self, *values) -> "Collection":
        for value in values:
            self._items[arr.next_index(self._items)]=value
        return self

    def append(self, value:Any) -> "Collection":
        return self.push(value)

    def prepend(self, value:Any, key:Optional[Key]=None) -> "Collection":
        """Put value first. Without a key, integer keys are renumbered from 0."""
        self._items=arr.prepend(self._items,value,key)
        return self

    def forget(self, *keys) -> "Collection":
        """Remove the given keys. Missing keys are ignored."""
        for key in _key_list(keys):
            self._items.pop(key,None)
        return self

    def pop(self, count:int=1) -> Any:
        """
        Remove and return the last value, or None when empty.

        With count > 1, remove up to count values and return them in a new collection,
        last one first.
        """
        if count==1:
            if not self._items:
                return None
            return self._items.popitem()[1]
        if count<1 or not self._items:
            return self._new()
        return self._new([self._items.popitem()[1] for _ in range(min(count,len(self._items)))])

    def shift(self, count:int=1) -> Any:
        """
        Remove and return the first value, or None when empty.

        With count > 1, remove up to count values and return them in a new collection.
        Integer keys of the remaining items are renumbered from 0.
        """
        if count!=1 and (count<1 or not self._items):
            return self._new()
        if count==1 and not self._items:
            return None
        pairs=list(self._items.items())
        taken=min(count,len(pairs))
        self._items=arr.reindex(pairs[taken:])
        if count==1:
            return pairs[0][1]
        return self._new([v for _,v in pairs[:taken]])

    def concat(self, source:Any) -> "Collection":
        """Copy with every value of source appended under fresh integer keys."""
        result=self._new(self._items)
        result.push(*self._coerce(source).values())
        return result

    def splice(self, offset:int, length:Optional[int]=None, replacement:Any=None) -> "Collection":
        """
        Remove a window of items in place and return them as a new collection.

        The values of replacement, if given, are inserted where the window was.
        Integer keys of both the remaining and the removed items are renumbered.
        """
        pairs=list(self._items.items())
        start,stop=arr.window(len(pairs),offset,length)
        inserted=[(0,v) for v in self._coerce(replacement).values()] if replacement is not None else []
        self._items=arr.reindex(pairs[:start]+inserted+pairs[stop:])
        return self._new(arr.reindex(pairs[start:stop]))

    def transform(self, callback:Callback) -> "Collection":
        """In-place map()."""
        self._items=self.map(callback).all()
        return self

    def clear(self) -> "Collection":
        self._items={}
        return self

    # transformations

    def map(self, callback:Callback) -> "Collection":
        return self._new({k:callback(v,k) for k,v in self._items.items()})

    def map_with_keys(self, callback:Callable[[Any,Key],Any]) -> "Collection":
        """
        callback(value, key) returns a mapping of new key -> new value for each item.
        Later items win when keys collide.
        """
        result={}
        for k,v in self._items.items():
            for mk,mv in arr.to_dict(callback(v,k)).items():
                result[mk]=mv
        return self._new(result)

    def map_to_dictionary(self, callback:Callable[[Any,Key],Any]) -> "Collection":
        """
        Group values by the key of the single-entry mapping callback(value, key) returns.
        Each group is a list in source order.
        """
        dictionary:Dict[Key,List[Any]]={}
        for k,v in self._items.items():
            pair=arr.to_dict(callback(v,k))
            if not pair:
                continue
            mk,mv=next(iter(pair.items()))
            dictionary.setdefault(mk,[]).append(mv)
        return self._new(dictionary)

    def filter(self, callback:Optional[Callable[[Any,Key],bool]]=None) -> "Collection":
        """Keep items for which callback(value, key) is true, or truthy values without a callback."""
        if callback is None:
            return self._new({k:v for k,v in self._items.items() if v})
        return self._new({k:v for k,v in self._items.items() if callback(v,k)})

    def flatten(self, depth:float=math.inf) -> "Collection":
        return self._new(arr.flatten(self._items,depth))

    def collapse(self) -> "Collection":
        return self._new(arr.collapse(self._items))

    def flip(self) -> "Collection":
        """Swap keys and values. Values that cannot serve as keys are skipped."""
        result={}
        for k,v in self._items.items():
            if isinstance(v,str) or arr.is_int_key(v):
                result[v]=k
            else:
                logger.debug("flip() skipped a value of type %s", type(v).__name__)
        return self._new(result)

    def pluck(self, value:Path, key:Optional[Path]=None) -> "Collection":
        return self._new(arr.pluck(self._items,value,key))

    def undot(self) -> "Collection":
        return self._new(arr.undot(self._items))

    def zip(self, *sources) -> "Collection":
        """
        Pair our values positionally with the values of each source.

        The result has one collection per item of ours; positions a source
        lacks are filled with None.
        """
        others=[list(self._coerce(source).values()) for source in sources]
        rows=[]
        for i,value in enumerate(self._items.values()):
            rows.append(self._new([value]+[other[i] if i<len(other) else None for other in others]))
        return self._new(rows)

    def pad(self, size:int, value:Any) -> "Collection":
        """Pad to abs(size) items with value, at the end if size > 0, at the front if size < 0."""
        return self._new(arr.pad(self._items,size,value))

    # ordering

    def sort(self, callback:Optional[Comparator]=None) -> "Collection":
        """Stable sort by value keeping keys. callback(a, b) returns <0, 0 or >0; without one, None values go last."""
        pairs=list(self._items.items())
        if callback is None:
            pairs.sort(key=lambda pair:_value_order(pair[1]))
        else:
            pairs.sort(key=cmp_to_key(lambda a,b:callback(a[1],b[1])))
        return self._new(dict(pairs))

    def sort_desc(self) -> "Collection":
        """Sort by value, largest first. None values stay last."""
        pairs=sorted(self._items.items(),key=lambda pair:(pair[1] is not None,pair[1]),reverse=True)
        return self._new(dict(pairs))

    def sort_keys(self, descending:bool=False) -> "Collection":
        """Sort by key, integer keys before string keys."""
        pairs=sorted(self._items.items(),key=lambda pair:_sort_key_order(pair[0]),reverse=descending)
        return self._new(dict(pairs))

    def sort_keys_desc(self) -> "Collection":
        return self.sort_keys(descending=True)

    def sort_keys_using(self, callback:Comparator) -> "Collection":
        pairs=sorted(self._items.items(),key=cmp_to_key(lambda a,b:callback(a[0],b[0])))
        return self._new(dict(pairs))

    def reverse(self) -> "Collection":
        return self._new(dict(reversed(list(self._items.items()))))

    def shuffle(self, seed:Optional[int]=None) -> "Collection":
        """Values in random order under fresh integer keys. A seed makes the order reproducible."""
        return self._new(arr.shuffle(self.to_list(),seed))

    def random(self, number:Optional[int]=None) -> Any:
        """
        Pick random values without replacement.

        Returns a single value when number is None, otherwise a new collection of
        number values.

        Raises:
            InvalidArgumentError: If the collection holds fewer values than requested
        """
        if number is None:
            return arr.random(self.to_list())
        return self._new(arr.random(self.to_list(),number))

    # partitioning

    def slice(self, offset:int, length:Optional[int]=None) -> "Collection":
        """Window of items starting at offset (negative counts from the end), keys kept."""
        return self._new(arr.slice_items(self._items,offset,length))

    def skip(self, count:int) -> "Collection":
        return self.slice(count)

    def take(self, limit:int) -> "Collection":
        """First limit items, or the last abs(limit) items if limit is negative."""
        if limit<0:
            return self.slice(limit,abs(limit))
        return self.slice(0,limit)

    def nth(self, step:int, offset:int=0) -> "Collection":
        """Every step-th value starting at offset, under fresh integer keys."""
        if step<1:
            raise InvalidArgumentError(f"nth() step must be at least 1, got {step}")
        return self._new(self.slice(offset).to_list()[::step])

    def chunk(self, size:int) -> "Collection":
        """Collection of consecutive chunks of at most size items, keys kept inside each chunk."""
        if size<=0:
            return self._new()
        pairs=list(self._items.items())
        return self._new([self._new(dict(pairs[i:i+size])) for i in range(0,len(pairs),size)])

    def split(self, number_of_groups:int) -> "Collection":
        """
        Split into number_of_groups groups whose sizes differ by at most one.

        The first count % number_of_groups groups get the extra item; empty groups are
        left out. Integer keys are renumbered inside each group.
        """
        if number_of_groups<1:
            raise InvalidArgumentError(f"split() needs at least 1 group, got {number_of_groups}")
        groups=self._new()
        group_size,remain=divmod(len(self._items),number_of_groups)
        start=0
        for i in range(number_of_groups):
            size=group_size+1 if i<remain else group_size
            if size:
                groups.push(self._new(arr.slice_items(self._items,start,size,preserve_keys=False)))
                start+=size
        return groups

    def split_in(self, number_of_groups:int) -> "Collection":
        """Chunk into groups of ceil(count / number_of_groups) items, the last one possibly smaller."""
        if number_of_groups<1:
            raise InvalidArgumentError(f"split_in() needs at least 1 group, got {number_of_groups}")
        return self.chunk(math.ceil(len(self._items)/number_of_groups))

    # inspection

    def count(self) -> int:
        return len(self._items)

    def is_empty(self) -> bool:
        return not self._items

    def contains_one_item(self) -> bool:
        return len(self._items)==1

    def implode(self, value:str, glue:Optional[str]=None) -> str:
        """
        Join the items into a string.

        If the items are records, value is the field to pluck and glue the separator.
        Otherwise value is the separator.
        """
        if arr.accessible(self.first()):
            return (glue or '').join(_stringify(v) for v in self.pluck(value))
        return value.join(_stringify(v) for v in self._items.values())

    def join(self, glue:str, final_glue:str='') -> str:
        """
        Join values with glue, using final_glue before the last one.

        Example:
            >>> Collection(["a", "b", "c"]).join(", ", " and ")
            'a, b and c'
        """
        if final_glue=='':
            return self.implode(glue)
        count=len(self._items)
        if count==0:
            return ''
        if count==1:
            return _stringify(self.last())
        collection=self.values()
        final_item=collection.pop()
        return collection.implode(glue)+final_glue+_stringify(final_item)

    # protocol

    def __len__(self):
        return len(self._items)

    def __iter__(self):
        return iter(list(self._items.values()))

    def __contains__(self, key):
        return key in self._items

    def __getitem__(self, key):
        return self._items[key]

    def __setitem__(self, key, value):
        if key is None:
            self.push(value)
        else:
            self._items[key]=value

    def __delitem__(self, key):
        del self._items[key]

    def __eq__(self, other):
        if isinstance(other,Collection):
            return list(self._items.items())==list(other._items.items())
        return NotImplemented

    __hash__=None

    def __repr__(self):
        content=', '.join(f"{k!r}: {v!r}" for k,v in self._items.items())
        return f"{self.__class__.__name__}({{{content}}})"

    def __str__(self):
        return repr(self)
