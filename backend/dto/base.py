"""
Reflective DTO base class.

A DTO class declares, in order, which names it projects from a source
object. Construction reads every declared name from one source (ORM record,
plain object or mapping), applies the optional transform, and freezes the
result.

Usage:
    class UserDto(Dto):
        id = DtoAttribute()
        email = DtoAttribute(transform=str.lower)
        administrator = DtoAttribute("administrator?")

    UserDto.register("full_name")

    dto = UserDto(user)
    dto.email, dto.administrator, dto["administrator?"]
    dto.to_dict()
"""

import inspect
import json
import re
from collections.abc import Mapping
from typing import Any, Callable, Dict, List, NamedTuple, Optional

from pydantic_core import to_jsonable_python

from exceptions import ConfigurationError, TransformError, UnknownAttributeError

Transform = Callable[[Any], Any]

_NAME_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*[?!]?$")
_MISSING = object()


class Descriptor(NamedTuple):
    name: str
    transform: Optional[Transform]


def storage_key(name: str) -> str:
    """Strip a trailing '?' or '!' so the name can be used as a Python attribute."""
    return name.rstrip('?!')


def _json_fallback(value: Any) -> Any:
    if isinstance(value, Dto):
        return value.to_dict()
    return str(value)


class DtoAttribute:
    """
    Class-body declaration of a DTO attribute.

    Args:
        name: Attribute name to read from the source. Defaults to the name the
            descriptor is bound to; pass it explicitly for predicate names
            such as "administrator?".
        transform: Optional unary callable applied to the raw value
    """

    def __init__(self, name: Optional[str] = None, transform: Optional[Transform] = None):
        self.name = name
        self.transform = transform

    def __set_name__(self, owner, attr_name: str):
        if self.name is None:
            self.name = attr_name

    def __get__(self, instance, owner):
        if instance is None:
            return self
        return instance._values[storage_key(self.name)]

    def __set__(self, instance, value):
        raise AttributeError(f"{type(instance).__name__} is immutable")

    def __delete__(self, instance):
        raise AttributeError(f"{type(instance).__name__} is immutable")

    def __repr__(self) -> str:
        return f"DtoAttribute({self.name!r})"


class Dto:
    """
    Immutable value object built from exactly one source snapshot.

    Values are resolved once, at construction, in declaration order:
    - mappings: key lookup by the declared name, then by its storage key
    - other objects: attribute read by the declared name, then by its storage
      key, then by ``is_<key>`` for predicate names ending in '?'. Bound
      methods are called with no arguments.
    - anything else resolves to None, or raises UnknownAttributeError when
      the class was declared with ``strict=True``

    Subclasses inherit the parent's attributes and may re-register a name to
    replace its transform; the name keeps its original position.
    """

    _dto_attributes: Dict[str, Optional[Transform]] = {}
    _dto_strict: bool = False

    def __init_subclass__(cls, strict: Optional[bool] = None, **kwargs):
        super().__init_subclass__(**kwargs)
        cls._dto_attributes = dict(cls._dto_attributes)
        if strict is not None:
            cls._dto_strict = strict

        for attr_name, value in list(cls.__dict__.items()):
            if isinstance(value, DtoAttribute):
                if storage_key(value.name) != attr_name:
                    raise ConfigurationError(
                        f"{cls.__name__}.{attr_name} must be bound to '{storage_key(value.name)}' "
                        f"to expose attribute '{value.name}'"
                    )
                cls._add_descriptor(value.name, value.transform)

    # ------------------------------------------------------------------
    # Attribute descriptor registry
    # ------------------------------------------------------------------

    @classmethod
    def register(cls, name: str, transform: Optional[Transform] = None) -> None:
        """
        Add (or overwrite) an attribute descriptor.

        Args:
            name: Identifier, optionally ending in '?' or '!'
            transform: Optional unary callable applied to the raw value

        Raises:
            ConfigurationError: If the name is invalid, the transform is not
                callable, or the class is Dto itself
        """
        if cls is Dto:
            raise ConfigurationError("Attributes must be registered on a Dto subclass")

        cls._add_descriptor(name, transform)

        key = storage_key(name)
        if not isinstance(cls.__dict__.get(key), DtoAttribute):
            setattr(cls, key, DtoAttribute(name, transform))

    @classmethod
    def _add_descriptor(cls, name: str, transform: Optional[Transform]) -> None:
        if not isinstance(name, str) or not _NAME_PATTERN.match(name):
            raise ConfigurationError(f"Invalid DTO attribute name: {name!r}")
        if transform is not None and not callable(transform):
            raise ConfigurationError(f"Transform for '{name}' must be callable")

        key = storage_key(name)
        if key in _RESERVED_NAMES:
            raise ConfigurationError(f"DTO attribute '{name}' would shadow Dto.{key}")
        for existing in cls._dto_attributes:
            if existing != name and storage_key(existing) == key:
                raise ConfigurationError(
                    f"DTO attribute '{name}' collides with '{existing}' on {cls.__name__}"
                )

        cls._dto_attributes[name] = transform

    @classmethod
    def descriptors(cls) -> List[Descriptor]:
        """Registered descriptors in declaration order."""
        return [Descriptor(name, transform) for name, transform in cls._dto_attributes.items()]

    @classmethod
    def attribute_names(cls) -> List[str]:
        return list(cls._dto_attributes)

    # ------------------------------------------------------------------
    # Materializer
    # ------------------------------------------------------------------

    def __init__(self, source: Any):
        values = {}
        for name, transform in self._dto_attributes.items():
            value = self._read(source, name)
            if transform is not None:
                try:
                    value = transform(value)
                except Exception as e:
                    raise TransformError(name, type(self).__name__, e) from e
            values[storage_key(name)] = value

        object.__setattr__(self, '_values', values)

    @classmethod
    def _read(cls, source: Any, name: str) -> Any:
        key = storage_key(name)

        if isinstance(source, Mapping):
            for candidate in (name, key):
                if candidate in source:
                    return source[candidate]
        else:
            candidates = [name, key]
            if name.endswith('?'):
                candidates.append(f"is_{key}")
            for candidate in candidates:
                value = getattr(source, candidate, _MISSING)
                if value is not _MISSING:
                    return value() if inspect.ismethod(value) else value

        if cls._dto_strict:
            raise UnknownAttributeError(name, cls.__name__, type(source).__name__)
        return None

    # ------------------------------------------------------------------
    # Readers and conversions
    # ------------------------------------------------------------------

    def __getattr__(self, name: str) -> Any:
        # Only reached for names that are not plain attributes, e.g. "administrator?"
        values = self.__dict__.get('_values')
        if values is not None and name in self._dto_attributes:
            return values[storage_key(name)]
        raise AttributeError(f"{type(self).__name__!r} object has no attribute {name!r}")

    def __getitem__(self, name: str) -> Any:
        if name in self._dto_attributes or name in self._values:
            return self._values[storage_key(name)]
        raise KeyError(name)

    def __setattr__(self, name: str, value: Any):
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __delattr__(self, name: str):
        raise AttributeError(f"{type(self).__name__} is immutable")

    def to_dict(self) -> Dict[str, Any]:
        """Attribute name -> value, in declaration order."""
        return {name: self._values[storage_key(name)] for name in self._dto_attributes}

    def to_json(self, **kwargs) -> str:
        """JSON encoding of to_dict(); extra kwargs go to json.dumps."""
        return json.dumps(to_jsonable_python(self.to_dict(), fallback=_json_fallback), **kwargs)

    def __eq__(self, other: Any) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self._values == other._values

    # Values may be lists or dicts
    __hash__ = None

    def __repr__(self) -> str:
        attrs = ", ".join(f"{name}={value!r}" for name, value in self.to_dict().items())
        return f"<{type(self).__name__} {attrs}>"


_RESERVED_NAMES = frozenset({'_values'} | {name for name in vars(Dto) if not name.startswith('__')})
