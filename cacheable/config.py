"""
Configuration for cache contexts.

The :class:`ConfigSection` class is intended to be used as a base class for configuration classes, and the
:class:`ConfigItem` descriptor is intended to be used to define each configurable option in subclasses of ConfigSection.
Values that were never set fall back to the default defined by their ConfigItem, so deleting an override restores the
default.

:author: Doug Skrypa
"""

from __future__ import annotations

from collections import ChainMap
from numbers import Real
from typing import Union, TypeVar, Callable, Any, Mapping, Generic, Type, Optional, overload

from .exceptions import InvalidConfigError

__all__ = ['ConfigItem', 'ConfigSection', 'CacheConfig', 'GLOBAL_CACHE_MINUTES', 'cache_minutes']

T = TypeVar('T')
CV = TypeVar('CV')
Kwargs = Union[Mapping[str, Any], None]
ConfigMap = Union[Mapping[str, Any], 'ConfigSection', None]
Minutes = Union[int, float]

GLOBAL_CACHE_MINUTES = 60


def cache_minutes(value: Optional[Minutes], allow_none: bool = False) -> Optional[Minutes]:
    """Validate a number of minutes for which a value should be cached."""
    if value is None and allow_none:
        return None
    if isinstance(value, bool) or not isinstance(value, Real) or value <= 0:
        raise ValueError(f'Invalid cache minutes={value!r} - expected a positive number')
    return value


class ConfigItem(Generic[CV]):
    __slots__ = ('name', 'type', 'default')

    def __init__(self, default: CV, type: Callable[..., CV] = None):  # noqa
        self.type = type
        self.default = default

    def __set_name__(self, owner: Type[ConfigSection], name: str):
        self.name = name
        owner._config_items_[name] = self

    @overload
    def __get__(self, instance: None, owner: Type[ConfigSection]) -> ConfigItem[CV]:
        ...

    @overload
    def __get__(self, instance: ConfigSection, owner: Type[ConfigSection]) -> CV:
        ...

    def __get__(self, instance, owner):
        try:
            return instance.__dict__[self.name]
        except AttributeError:  # instance is None
            return self
        except KeyError:
            return self.default

    def __set__(self, instance: ConfigSection, value: CV):
        if self.type is not None:
            try:
                value = self.type(value)
            except (TypeError, ValueError) as e:
                raise InvalidConfigError(f'Invalid value for config option {self.name!r}: {e}') from e
        instance.__dict__[self.name] = value

    def __delete__(self, instance: ConfigSection):
        try:
            del instance.__dict__[self.name]
        except KeyError as e:
            raise AttributeError(f'No {self.name!r} config was stored for {instance}') from e

    def __repr__(self) -> str:
        return f'<{self.__class__.__name__}({self.default!r}, type={self.type!r})>'


class ConfigMeta(type):
    """
    Metaclass for ConfigSections.  Necessary to initialize the ``_config_items_`` dict for ConfigItem registration
    because the contents of a class is evaluated before ``__init_subclass__`` is called.
    """
    _config_items_: dict[str, ConfigItem]

    @classmethod
    def __prepare__(mcs, name: str, bases, **kwargs) -> dict[str, Any]:
        config_items = {}
        for base in bases:
            if isinstance(base, mcs):
                config_items.update(base._config_items_)
        return {'_config_items_': config_items}


class ConfigSection(metaclass=ConfigMeta):
    _config_items_: dict[str, ConfigItem]

    def __init__(self, config: ConfigMap = None, **kwargs):
        self.update(config, **kwargs)

    def update(self, config: ConfigMap = None, **kwargs):
        """
        Update this section with the given content.  If any of the provided keys do not correspond with a
        :class:`ConfigItem` in this section, then an :class:`InvalidConfigError` will be raised before any values are
        changed.

        :param config: A dict or other mapping containing values that should be used in this section
        :param kwargs: Additional keyword arguments for values that should be used in this section
        """
        if isinstance(config, ConfigSection):
            config = config.__dict__
        if not (config_map := ChainMap(kwargs, config) if config and kwargs else (config or kwargs)):
            return
        if bad := set(config_map).difference(self._config_items_):
            raise InvalidConfigError(f'Invalid configuration - unsupported options: {", ".join(sorted(bad))}')
        for key, val in config_map.items():
            setattr(self, key, val)

    def reset(self):
        """Discard all overrides so that every item reverts to its default value."""
        self.__dict__.clear()

    def as_dict(self, include_defaults: bool = True) -> dict[str, Any]:
        keys = self._config_items_ if include_defaults else self.__dict__
        return {key: getattr(self, key) for key in keys}

    def __contains__(self, key: str) -> bool:
        """Returns True if the given key is a config item in this section and it has a non-default value."""
        return key in self.__dict__

    def __getitem__(self, key: str):
        if key not in self._config_items_:
            raise KeyError(key)
        return getattr(self, key)

    def __setitem__(self, key: str, value: Any):
        if key not in self._config_items_:
            raise KeyError(key)
        setattr(self, key, value)

    def __repr__(self) -> str:
        overrides = ', '.join(f'{k}={v!r}' for k, v in sorted(self.__dict__.items()))
        return f'<{self.__class__.__name__}({overrides})>'


class CacheConfig(ConfigSection):
    #: String prepended to every derived cache key
    prefix: str = ConfigItem('', type=str)
    #: Number of minutes to cache values when neither a one-shot nor a default decorator TTL was set
    global_minutes: Minutes = ConfigItem(GLOBAL_CACHE_MINUTES, type=cache_minutes)
    #: Whether stored values that are falsy (0, False, '', None) should be treated as cache hits
    cache_falsy: bool = ConfigItem(True, type=bool)
    #: Whether concurrent misses for the same key should wait for a single call to compute the value
    single_flight: bool = ConfigItem(True, type=bool)
