import os
from dataclasses import dataclass, field, fields
from typing import Any, Callable, Dict, FrozenSet, Optional

from dotenv import load_dotenv

from ..strings import DEFAULT_PATTERN


def _parse_bool(raw:str)->bool:
    return raw.strip().lower() in ('1','true','yes','on')

def _parse_optional_int(raw:str)->Optional[int]:
    raw=raw.strip()
    if raw=='' or raw.lower()=='none':
        return None
    return int(raw)

_ENV_PARSERS:Dict[str,Callable[[str],Any]]={
    'json_indent':_parse_optional_int,
    'json_ensure_ascii':_parse_bool,
    'json_sort_keys':_parse_bool,
}


@dataclass(frozen=True)
class CollectionConfig:
    """Class-level settings of a Collection subclass.

    Attributes:
        string_pattern: Delimiter regex used when plain text is coerced into items
        json_indent: Default indent of to_json()
        json_ensure_ascii: Default ensure_ascii of to_json()
        json_sort_keys: Default sort_keys of to_json()
    """
    string_pattern: str = DEFAULT_PATTERN
    json_indent: Optional[int] = None
    json_ensure_ascii: bool = False
    json_sort_keys: bool = False

    # fields passed explicitly to __init__
    _explicit: FrozenSet[str] = field(default_factory=frozenset,init=False,repr=False)

    def __init__(self, **kwargs):
        settable=self._settable_fields()
        unknown=sorted(set(kwargs)-set(settable))
        if unknown:
            raise TypeError(f"Unknown config field(s) {unknown}. Allowed: {sorted(settable)}")
        values={name:kwargs.get(name,default) for name,default in settable.items()}
        self._assign(values,frozenset(kwargs))

    @classmethod
    def _settable_fields(cls) -> Dict[str, Any]:
        """Name -> default of every field a caller may set."""
        return {f.name:f.default for f in fields(cls) if f.init}

    def _assign(self, values:Dict[str,Any], explicit:FrozenSet[str]) -> None:
        # the dataclass is frozen, so attributes go through object.__setattr__
        for name,value in values.items():
            object.__setattr__(self,name,value)
        object.__setattr__(self,"_explicit",explicit)

    def merge(self, other:"CollectionConfig") -> "CollectionConfig":
        """
        Layer other over self.

        A field takes the value of other only if other set it explicitly,
        otherwise it keeps the value of self. The result remembers the fields
        set explicitly in either config, so it can be layered again.
        """
        values={
            name:getattr(other if name in other._explicit else self,name)
            for name in self._settable_fields()
        }
        merged=object.__new__(CollectionConfig)
        merged._assign(values,self._explicit|other._explicit)
        return merged

    @classmethod
    def from_env(cls, prefix:str="TOOLKITS_", dotenv_path:Optional[str]=None) -> "CollectionConfig":
        """Build a config from environment variables, loading a .env file first.

        Each field is read from the variable named prefix + FIELD_NAME in upper case
        (TOOLKITS_STRING_PATTERN, TOOLKITS_JSON_INDENT, ...). Variables already set in
        the environment take precedence over the .env file. Only the variables that
        are present count as explicit fields.

        Args:
            prefix: Prefix of the variable names
            dotenv_path: .env file to load (defaults to .env in the working directory)
        """
        load_dotenv(dotenv_path or os.path.join(os.getcwd(),'.env'))
        kwargs={}
        for name in cls._settable_fields():
            raw=os.environ.get(prefix+name.upper())
            if raw is not None:
                kwargs[name]=_ENV_PARSERS.get(name,str)(raw)
        return cls(**kwargs)


class CollectionMeta(type):
    """Merges the _config of a Collection subclass over the configs of its bases."""

    def __new__(mcls, name, bases, dct):
        local_config=dct.get('_config')
        if local_config is not None and not isinstance(local_config,CollectionConfig):
            raise TypeError(
                f"_config must be a CollectionConfig instance created via Collection.config(), "
                f"got {type(local_config)}. Use: _config = Collection.config(json_indent=2, ...)"
            )

        # rightmost base first, so that in class X(A, B) the settings of A win over B
        config=CollectionConfig()
        for base in reversed(bases):
            base_config=getattr(base,'_config',None)
            if base_config is not None:
                config=config.merge(base_config)
        if local_config is not None:
            config=config.merge(local_config)

        dct['_config']=config
        return super().__new__(mcls, name, bases, dct)
