"""
Cache stores that may be used by :class:`CacheContext<cacheable.context.CacheContext>` instances, and the process-wide
store factory that is consulted when a context was not given a store explicitly.

Any object that provides the following methods may be used as a store:

- ``get(key)``: Return the stored value, or None if there is no fresh value for the key.  Stores whose ``get`` method
  also accepts a default as its second argument (such as subclasses of :class:`CacheStore`) are given one, which allows
  stored None values to be distinguished from missing ones.
- ``put(key, value, minutes)``: Store the value for the given number of minutes
- ``flush()``: Remove all stored values

:author: Doug Skrypa
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from inspect import signature
from threading import RLock
from time import monotonic
from typing import Any, Callable, Hashable, MutableMapping, NamedTuple, Optional, Union

from cachetools import TLRUCache
from wrapt import synchronized

__all__ = [
    'CacheStore',
    'MemoryStore',
    'MappingStore',
    'STORE_METHODS',
    'missing_store_methods',
    'get_accepts_default',
    'set_store_factory',
    'get_store_factory',
    'create_default_store',
]
log = logging.getLogger(__name__)

STORE_METHODS = ('get', 'put', 'flush')
Minutes = Union[int, float]
StoreFactory = Callable[[], 'CacheStore']

_factory_lock = RLock()
_store_factory: Optional[StoreFactory] = None


def missing_store_methods(store) -> list[str]:
    """The names of required store methods that the given object does not provide."""
    return [name for name in STORE_METHODS if not callable(getattr(store, name, None))]


def get_accepts_default(store) -> bool:
    """
    :param store: An object that provides a callable ``get`` method
    :return: True if the store's ``get`` method accepts a default value after the key, False if it only accepts a key
    :raises: :class:`TypeError` if the store's ``get`` method cannot be called with a single key
    """
    if CacheStore in type(store).__mro__:
        return True
    try:
        sig = signature(store.get)
    except (TypeError, ValueError):  # Some builtin / extension methods do not expose a signature
        return True

    sig.bind('key')
    try:
        sig.bind('key', None)
    except TypeError:
        return False
    return True


class CacheStore(ABC):
    """
    Base class for cache stores.  Classes that provide ``get``, ``put``, and ``flush`` methods are considered to be
    virtual subclasses, even if they do not extend this class.
    """
    __slots__ = ()

    @abstractmethod
    def get(self, key: str, default: Any = None) -> Any:
        raise NotImplementedError

    @abstractmethod
    def put(self, key: str, value: Any, minutes: Minutes):
        raise NotImplementedError

    @abstractmethod
    def flush(self):
        raise NotImplementedError

    @classmethod
    def __subclasshook__(cls, subclass):
        if cls is CacheStore:
            for name in STORE_METHODS:
                if not any(callable(base.__dict__.get(name)) for base in subclass.__mro__):
                    return NotImplemented
            return True
        return NotImplemented


class _Entry(NamedTuple):
    value: Any
    ttl: float


class MemoryStore(CacheStore):
    """
    An in-memory store in which each entry expires after the number of minutes it was stored with.  When the store is
    full, expired entries are removed first, then the least recently used entries.

    :param maxsize: The maximum number of entries to hold
    :param timer: Callable that returns the current time in seconds (default: :func:`time.monotonic`)
    """

    def __init__(self, maxsize: int = 4096, timer: Callable[[], float] = monotonic):
        self._cache = TLRUCache(maxsize, self._time_to_use, timer=timer)

    @staticmethod
    def _time_to_use(key, entry: _Entry, now: float) -> float:
        return now + entry.ttl

    @synchronized
    def get(self, key: str, default: Any = None) -> Any:
        try:
            return self._cache[key].value
        except KeyError:
            return default

    @synchronized
    def put(self, key: str, value: Any, minutes: Minutes):
        log.log(9, f'Storing value for {key=} for {minutes=}')
        self._cache[key] = _Entry(value, minutes * 60)

    @synchronized
    def flush(self):
        self._cache.clear()

    @synchronized
    def expire(self):
        """Remove all expired entries."""
        return self._cache.expire()

    def __len__(self) -> int:
        with synchronized(self):
            self._cache.expire()
            return len(self._cache)

    def __contains__(self, key: str) -> bool:
        with synchronized(self):
            return key in self._cache

    def __repr__(self) -> str:
        return f'<{self.__class__.__name__}[maxsize={self._cache.maxsize}]>'


class MappingStore(CacheStore):
    """
    Adapter that allows any mutable mapping (a dict, a :class:`cachetools.TTLCache`, a persistent mapping, etc) to be
    used as a store.  The mapping is responsible for any expiration; the number of minutes passed to :meth:`.put` is
    ignored.
    """
    __slots__ = ('mapping',)

    def __init__(self, mapping: MutableMapping[Hashable, Any] = None):
        self.mapping = {} if mapping is None else mapping

    def get(self, key: str, default: Any = None) -> Any:
        try:
            return self.mapping[key]
        except KeyError:
            return default

    def put(self, key: str, value: Any, minutes: Minutes):
        try:
            self.mapping[key] = value
        except ValueError:  # May be raised if the value is too large to store
            log.debug(f'Unable to store value for {key=} - it was rejected by {self.mapping.__class__.__name__}')

    def flush(self):
        self.mapping.clear()

    def __repr__(self) -> str:
        return f'<{self.__class__.__name__}[{self.mapping.__class__.__name__}]>'


# region Store Factory


def set_store_factory(factory: Optional[StoreFactory]):
    """
    Register a process-wide callable that accepts no arguments and returns a new store.  It will be called by any
    :class:`CacheContext<cacheable.context.CacheContext>` that needs a store when none was set explicitly.

    :param factory: The store factory, or None to unregister the current factory
    """
    global _store_factory
    if factory is not None and not callable(factory):
        raise TypeError(f'Invalid store {factory=} - expected a callable')
    with _factory_lock:
        _store_factory = factory


def get_store_factory() -> Optional[StoreFactory]:
    with _factory_lock:
        return _store_factory


def create_default_store() -> Optional[CacheStore]:
    """Create a store using the registered store factory, or return None if no factory was registered."""
    if (factory := get_store_factory()) is None:
        return None
    store = factory()
    log.debug(f'Created cache {store=} using {factory=}')
    return store


# endregion
