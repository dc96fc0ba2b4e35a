"""Key-path utilities for nested ordered mappings.

This module holds the plain functions the Collection class is built on. They work
on dicts, on non-string sequences (addressed by index) and on Collection instances,
and never mutate their inputs: every function returns a fresh container.

Key Features:
    - Path-based access: address nested values with dotted paths ("users.0.name") or key tuples
    - Projection: pluck a value (and optionally a key) out of every nested record
    - Flattening: flatten nested containers to a given depth, dot/undot nested mappings
    - Ordered-map algebra: list-style merge, in-place replace, recursive variants
    - Positional helpers: slices with negative offsets, integer key renumbering, padding
    - Sampling: shuffles and random picks driven by numpy generators

Typical Usage:
    >>> from toolkits import arr
    >>> data = {"users": [{"name": "Alice", "age": 30}]}
    >>> arr.get(data, "users.0.name")
    'Alice'
    >>> arr.get(data, "users.1.name", default="nobody")
    'nobody'
    >>> arr.dot({"a": {"b": 1, "c": 2}})
    {'a.b': 1, 'a.c': 2}

Notes:
    - Integer keys are ints that are not bools. They are the only keys that
      get renumbered by merge, reindex and friends.
    - A path segment that looks like an integer also matches the string key
      of the same spelling in a mapping ("a.0" finds {"a": {"0": ...}}).
"""

import math
from collections.abc import Mapping, Sequence
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple, TypeAlias, Union

import numpy as np

from .errors import InvalidArgumentError

Key: TypeAlias = Union[int, str]
Path: TypeAlias = Union[Key, Tuple[Key, ...], List[Key]]
Predicate = Callable[[Any, Key], bool]


class _MISSING:
    """Sentinel for lookups that found nothing, distinct from a stored None."""
    def __str__(self)->str:
        return "MISSING"

    def __repr__(self)->str:
        return "MISSING"

    def __bool__(self)->bool:
        return False

MISSING=_MISSING()


def is_collection(obj:Any)->bool:
    from .collection import Collection
    return isinstance(obj,Collection)

def is_int_key(key:Any)->bool:
    return isinstance(key,int) and not isinstance(key,bool)

def accessible(obj:Any)->bool:
    """Test if obj can be addressed by key: a Mapping, a Collection or a non-string Sequence."""
    if is_collection(obj) or isinstance(obj,Mapping):
        return True
    return isinstance(obj,Sequence) and not isinstance(obj,(str,bytes,bytearray))

def to_dict(obj:Any)->Dict[Key,Any]:
    """Return a shallow key->value dict of an accessible container (sequences are keyed by index)."""
    if is_collection(obj):
        return obj.all()
    if isinstance(obj,Mapping):
        return dict(obj)
    if accessible(obj):
        return dict(enumerate(obj))
    raise TypeError(f"Expected a Mapping, Sequence or Collection, got {type(obj)}")

def join_path(path_tuple:Tuple[Key,...])->str:
    """
    joins a path tuple into a path str : ('a',0,'b') -> "a.0.b"
    """
    return '.'.join(str(k) for k in path_tuple)

def split_path(path:Path)->Tuple[Key,...]:
    """
    splits a path into a tuple of keys : "a.0.b" -> ('a',0,'b')
    ints and tuples are returned as key tuples unchanged
    """
    if isinstance(path,(tuple,list)):
        return tuple(path)
    if not isinstance(path,str):
        return (path,)
    def format(key:str)->Key:
        try:
            return int(key)
        except ValueError:
            return key
    return tuple(format(k) for k in path.split('.'))

def lookup(obj:Any, segment:Key)->Any:
    """Return the actual key under which segment is stored in obj, or MISSING."""
    if is_collection(obj) or isinstance(obj,Mapping):
        if segment in obj:
            return segment
        if is_int_key(segment) and str(segment) in obj:
            return str(segment)
        return MISSING
    if accessible(obj) and is_int_key(segment) and -len(obj)<=segment<len(obj):
        return segment
    return MISSING

def exists(obj:Any, key:Key)->bool:
    """Check if key is a direct key (or index) of obj. Paths are not followed."""
    if is_collection(obj) or isinstance(obj,Mapping):
        return key in obj
    return lookup(obj,key) is not MISSING

def get(target:Any, path:Optional[Path], default:Any=None)->Any:
    """Retrieve a value by direct key or by dotted path.

    A direct key always wins over the path reading of the same string. Mappings,
    sequences and Collections are traversed by key; any other object is read by
    attribute as a last resort.

    Args:
        target: Container to read from
        path: Direct key, dotted path string or tuple of keys. None returns target itself.
        default: Returned when any segment is missing

    Returns:
        The value found, or default

    Examples:
        >>> data = {"a": {"b": [1, 2, {"c": 3}]}, "x.y": 0}
        >>> get(data, "a.b.2.c")
        3
        >>> get(data, "x.y")
        0
        >>> get(data, "a.z", default=None) is None
        True
    """
    if path is None:
        return target
    if accessible(target) and not isinstance(path,(tuple,list)) and exists(target,path):
        return target[path]
    value=target
    for segment in split_path(path):
        if accessible(value):
            key=lookup(value,segment)
            if key is MISSING:
                return default
            value=value[key]
        elif value is not None and isinstance(segment,str) and hasattr(value,segment):
            value=getattr(value,segment)
        else:
            return default
    return value

def has(target:Any, path:Path)->bool:
    """Check if a direct key or dotted path exists in target."""
    return get(target,path,MISSING) is not MISSING

def set_path(target:Dict[Key,Any], path:Path, value:Any)->Dict[Key,Any]:
    """Set value at path inside target, creating intermediate dicts as needed.

    Intermediate values that are not mappings are replaced by empty dicts.
    target is modified in place and returned.
    """
    segments=split_path(path)
    current=target
    for segment in segments[:-1]:
        child=current.get(segment)
        if not isinstance(child,dict):
            child={}
            current[segment]=child
        current=child
    current[segments[-1]]=value
    return target

def wrap(value:Any)->List[Any]:
    """None -> [], list/tuple/set -> list, anything else -> [value]"""
    if value is None:
        return []
    if is_collection(value):
        return value.to_list()
    if isinstance(value,(list,tuple,set,frozenset)):
        return list(value)
    return [value]

def _copy_container(obj:Any)->Any:
    if is_collection(obj):
        return type(obj)(obj)
    if isinstance(obj,Mapping):
        return dict(obj)
    return list(obj)

def _without_path(container:Any, segments:Tuple[Key,...])->Any:
    # copies every container along the path, leaves the rest shared
    key=lookup(container,segments[0])
    if key is MISSING:
        return container
    if len(segments)==1:
        copy=_copy_container(container)
        del copy[key]
        return copy
    child=container[key]
    if not accessible(child):
        return container
    new_child=_without_path(child,segments[1:])
    if new_child is child:
        return container
    copy=_copy_container(container)
    copy[key]=new_child
    return copy

def except_(target:Any, keys:Any)->Dict[Key,Any]:
    """Return a copy of target without the given keys or dotted paths.

    Missing keys are ignored. Nested containers touched by a path are copied,
    so target itself is never modified.

    Examples:
        >>> except_({"a": 1, "b": {"c": 2, "d": 3}}, ["a", "b.c"])
        {'b': {'d': 3}}
    """
    result=to_dict(target)
    for key in wrap(keys):
        if key in result:
            del result[key]
        elif (isinstance(key,tuple) and key) or (isinstance(key,str) and '.' in key):
            result=_without_path(result,split_path(key))
    return result

def forget(target:Dict[Key,Any], keys:Any)->Dict[Key,Any]:
    """Remove keys or dotted paths from target in place and return it.

    Nested containers along a path are replaced by trimmed copies rather than
    modified, since they may be shared with other structures.
    """
    remaining=except_(target,keys)
    target.clear()
    target.update(remaining)
    return target

def pull(target:Dict[Key,Any], path:Path, default:Any=None)->Any:
    """Remove the value under path from target and return it, or default if absent."""
    value=get(target,path,MISSING)
    if value is MISSING:
        return default
    forget(target,[path])
    return value

def only(target:Any, keys:Any)->Dict[Key,Any]:
    """Return the entries of target whose key is listed, in target's order."""
    wanted=wrap(keys)
    return {k:v for k,v in to_dict(target).items() if k in wanted}

def pluck(items:Any, value:Path, key:Optional[Path]=None)->Dict[Key,Any]:
    """Project every record of items onto one of its fields.

    Args:
        items: Container of records (mappings, sequences, Collections or objects)
        value: Direct key or dotted path of the field to extract
        key: Optional key or path whose value re-keys the result

    Returns:
        Sequentially keyed dict of extracted values, or a dict keyed by the
        extracted keys when key is given (later records win on collisions).
        Missing fields yield None.

    Examples:
        >>> users = [{"id": 7, "name": "Ann"}, {"id": 9, "name": "Bob"}]
        >>> pluck(users, "name")
        {0: 'Ann', 1: 'Bob'}
        >>> pluck(users, "name", "id")
        {7: 'Ann', 9: 'Bob'}
    """
    results:Dict[Key,Any]={}
    for record in to_dict(items).values():
        item_value=get(record,value)
        if key is None:
            results[len(results)]=item_value
            continue
        item_key=get(record,key)
        if not isinstance(item_key,(str,int)):
            item_key=str(item_key)
        results[item_key]=item_value
    return results

def flatten(items:Any, depth:float=math.inf)->List[Any]:
    """Flatten nested containers into a single list of leaves, discarding keys.

    Args:
        items: Container to flatten
        depth: Number of nesting levels to open (infinite by default)

    Examples:
        >>> flatten([1, [2, 3], [4, [5]]])
        [1, 2, 3, 4, 5]
        >>> flatten([1, [2, [3]]], depth=1)
        [1, 2, [3]]
    """
    result=[]
    for item in to_dict(items).values():
        if not accessible(item):
            result.append(item)
        elif depth==1:
            result.extend(to_dict(item).values())
        else:
            result.extend(flatten(item,depth-1))
    return result

def collapse(items:Any)->List[Any]:
    """Concatenate the values of every nested container one level deep. Leaves are dropped."""
    result=[]
    for item in to_dict(items).values():
        if accessible(item):
            result.extend(to_dict(item).values())
    return result

def dot(items:Any, prepend:str='')->Dict[str,Any]:
    """Flatten a nested container into a dict of dotted path -> leaf.

    Empty containers are kept as leaves.
    """
    result={}
    for k,v in to_dict(items).items():
        path=f"{prepend}{k}"
        if accessible(v) and len(v)>0:
            result.update(dot(v,path+'.'))
        else:
            result[path]=v
    return result

def undot(items:Any)->Dict[Key,Any]:
    """Rebuild a nested dict from dotted path keys : {"a.b": 1} -> {"a": {"b": 1}}"""
    result:Dict[Key,Any]={}
    for k,v in to_dict(items).items():
        set_path(result,k,v)
    return result

def first(items:Any, predicate:Optional[Predicate]=None, default:Any=None)->Any:
    """Return the first value (passing predicate(value, key) if given), or default."""
    for k,v in to_dict(items).items():
        if predicate is None or predicate(v,k):
            return v
    return default

def last(items:Any, predicate:Optional[Predicate]=None, default:Any=None)->Any:
    """Return the last value (passing predicate(value, key) if given), or default."""
    for k,v in reversed(list(to_dict(items).items())):
        if predicate is None or predicate(v,k):
            return v
    return default

def is_list(items:Mapping)->bool:
    """True if the keys are exactly 0..n-1 in order."""
    return all(k==i and is_int_key(k) for i,k in enumerate(items))

def next_index(items:Mapping)->int:
    """Integer key an append would use: one past the largest integer key, or 0."""
    return max((k+1 for k in items if is_int_key(k)),default=0)

def reindex(pairs:Union[Mapping,Iterable[Tuple[Key,Any]]])->Dict[Key,Any]:
    """Renumber integer keys from 0 in order, keeping string keys as they are."""
    if isinstance(pairs,Mapping):
        pairs=pairs.items()
    result:Dict[Key,Any]={}
    index=0
    for k,v in pairs:
        if is_int_key(k):
            result[index]=v
            index+=1
        else:
            result[k]=v
    return result

def prepend(items:Mapping, value:Any, key:Optional[Key]=None)->Dict[Key,Any]:
    """Put value at the front.

    Without a key, value takes key 0 and existing integer keys are renumbered.
    With a key, that key moves to the front holding value.
    """
    if key is None:
        return reindex([(0,value)]+list(items.items()))
    result={key:value}
    for k,v in items.items():
        result.setdefault(k,v)
    return result

def window(count:int, offset:int, length:Optional[int]=None)->Tuple[int,int]:
    """Resolve an offset/length pair into [start, stop) positions.

    A negative offset counts from the end; a negative length stops that many
    items before the end; None runs to the end.
    """
    start=offset if offset>=0 else max(count+offset,0)
    start=min(start,count)
    if length is None:
        stop=count
    elif length<0:
        stop=max(count+length,start)
    else:
        stop=min(start+length,count)
    return start,stop

def slice_items(items:Mapping, offset:int, length:Optional[int]=None, preserve_keys:bool=True)->Dict[Key,Any]:
    """Return the [offset, offset+length) window of items, see window()."""
    pairs=list(items.items())
    start,stop=window(len(pairs),offset,length)
    chosen=pairs[start:stop]
    return dict(chosen) if preserve_keys else reindex(chosen)

def pad(items:Mapping, size:int, value:Any)->Dict[Key,Any]:
    """Pad items with value up to abs(size) entries, at the end if size>0, at the front if size<0."""
    missing=abs(size)-len(items)
    if missing<=0:
        return dict(items)
    if size>0:
        result=dict(items)
        for _ in range(missing):
            result[next_index(result)]=value
        return result
    return reindex([(0,value)]*missing+list(items.items()))

def merge(first:Mapping, second:Mapping)->Dict[Key,Any]:
    """List-style merge.

    Integer keys of both sides are renumbered and appended in order; string keys
    of second overwrite those of first in place.

    Examples:
        >>> merge({"x": 1, 0: "a"}, {"x": 2, 0: "b", "y": 3})
        {'x': 2, 0: 'a', 1: 'b', 'y': 3}
    """
    result=reindex(first)
    index=next_index(result)
    for k,v in second.items():
        if is_int_key(k):
            result[index]=v
            index+=1
        else:
            result[k]=v
    return result

def _like(template:Any, items:Dict[Key,Any])->Any:
    # give a merged dict back the shape of the container it replaces
    if is_collection(template):
        return type(template)(items)
    if not isinstance(template,Mapping) and is_list(items):
        return list(items.values())
    return items

def merge_recursive(first:Mapping, second:Mapping)->Dict[Key,Any]:
    """Like merge(), but string keys holding containers on both sides are merged recursively."""
    result=reindex(first)
    index=next_index(result)
    for k,v in second.items():
        if is_int_key(k):
            result[index]=v
            index+=1
        elif k in result and accessible(result[k]) and accessible(v):
            result[k]=_like(result[k],merge_recursive(to_dict(result[k]),to_dict(v)))
        else:
            result[k]=v
    return result

def replace(first:Mapping, second:Mapping)->Dict[Key,Any]:
    """Overwrite every key of first found in second, append the others with their own keys."""
    result=dict(first)
    result.update(second)
    return result

def replace_recursive(first:Mapping, second:Mapping)->Dict[Key,Any]:
    """Like replace(), but containers on both sides of a key are replaced recursively."""
    result=dict(first)
    for k,v in second.items():
        if k in result and accessible(result[k]) and accessible(v):
            result[k]=_like(result[k],replace_recursive(to_dict(result[k]),to_dict(v)))
        else:
            result[k]=v
    return result

def shuffle(values:Sequence, seed:Optional[int]=None)->List[Any]:
    """Return values in a random order. The same seed always gives the same order."""
    rng=np.random.default_rng(seed)
    return [values[int(i)] for i in rng.permutation(len(values))]

def random(values:Sequence, number:Optional[int]=None, seed:Optional[int]=None)->Any:
    """Pick random values without replacement.

    Args:
        values: Values to sample from
        number: How many to pick. None picks a single value and returns it unwrapped.
        seed: Optional seed for reproducible picks

    Returns:
        One value when number is None, otherwise a list of number values in their
        original relative order

    Raises:
        InvalidArgumentError: If more values are requested than available
            (including a single pick from an empty sequence), or number is negative
    """
    count=len(values)
    requested=1 if number is None else number
    if requested<0 or requested>count:
        raise InvalidArgumentError(f"You requested {requested} items, but there are only {count} items available.")
    rng=np.random.default_rng(seed)
    if number is None:
        return values[int(rng.integers(count))]
    if number==0:
        return []
    picks=sorted(int(i) for i in rng.choice(count,size=number,replace=False))
    return [values[i] for i in picks]
