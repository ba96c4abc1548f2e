"""
The shared state used by cache decorators: the store, the key prefix, the global number of minutes to cache values,
per-key locks for concurrent misses, and the registry of decorators for :class:`Cacheable<cacheable.mixins.Cacheable>`
hosts.

A default context is created on demand for decorators and hosts that were not given one explicitly.

:author: Doug Skrypa
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from threading import RLock
from typing import Any, Callable, Optional, Union

from wrapt import synchronized

from .config import CacheConfig, ConfigSection
from .exceptions import StoreNotFoundError, InvalidStoreError
from .registry import DecoratorRegistry
from .stores import CacheStore, missing_store_methods, get_accepts_default, create_default_store

__all__ = ['CacheContext', 'default_context', 'set_default_context']
log = logging.getLogger(__name__)

Minutes = Union[int, float]
StoreFactory = Callable[[], CacheStore]

_default_lock = RLock()
_default_context: Optional[CacheContext] = None


class CacheContext:
    def __init__(
        self,
        store: CacheStore = None,
        config: Union[CacheConfig, dict, None] = None,
        *,
        store_factory: StoreFactory = None,
        **kwargs,
    ):
        """
        :param store: The store in which cached values should be kept.  If not specified, then one will be created by
          the given ``store_factory`` or the process-wide store factory the first time that it is needed.
        :param config: A :class:`CacheConfig` or a mapping of config options
        :param store_factory: A callable that accepts no arguments and returns a store
        :param kwargs: Additional config options (``prefix``, ``global_minutes``, ``cache_falsy``, ``single_flight``)
        """
        self.config = CacheConfig(config, **kwargs)
        self.registry = DecoratorRegistry(self)
        self._store = None
        self._get_accepts_default = True
        self._store_factory = store_factory
        self._key_locks_lock = RLock()
        self._key_locks: dict[str, list] = {}  # key: [lock, number of threads holding or waiting for it]
        if store is not None:
            self.set_store(store)

    # region Store

    @property
    def store(self) -> CacheStore:
        with synchronized(self):
            if self._store is None:
                if (store := self._create_store()) is None:
                    raise StoreNotFoundError()
                self.set_store(store)
            return self._store

    @store.setter
    def store(self, store: CacheStore):
        self.set_store(store)

    @synchronized
    def set_store(self, store: CacheStore):
        if missing := missing_store_methods(store):
            raise InvalidStoreError(store, missing)
        try:
            self._get_accepts_default = get_accepts_default(store)
        except TypeError as e:
            raise InvalidStoreError(store, reason=f'its get method cannot be called with a single key: {e}') from e
        self._store = store

    def get_stored(self, key: str, default: Any = None) -> Any:
        """
        Retrieve a value from the store.  Stores whose ``get`` method only accepts a key are assumed to return None for
        missing keys, so None is treated as a missing value for them.
        """
        with synchronized(self):
            store, accepts_default = self.store, self._get_accepts_default
        if accepts_default:
            return store.get(key, default)
        value = store.get(key)
        return default if value is None else value

    def _create_store(self) -> Optional[CacheStore]:
        if self._store_factory is not None:
            store = self._store_factory()
            log.debug(f'Created cache {store=} using {self._store_factory=}')
            return store
        return create_default_store()

    def flush(self):
        """Remove all values from the store.  This affects all keys in the store, not only ones created by this context."""
        log.debug(f'Flushing cache store for {self}')
        self.store.flush()

    @synchronized
    def reset(self):
        """Restore the default prefix, global minutes, and other options, then flush the store."""
        self.config.reset()
        self.flush()

    # endregion

    # region Config Properties

    @property
    def prefix(self) -> str:
        return self.config.prefix

    @prefix.setter
    def prefix(self, value: str):
        with synchronized(self):
            self.config.prefix = value

    @property
    def global_minutes(self) -> Minutes:
        return self.config.global_minutes

    @global_minutes.setter
    def global_minutes(self, value: Minutes):
        with synchronized(self):
            self.config.global_minutes = value

    @property
    def cache_falsy(self) -> bool:
        return self.config.cache_falsy

    @property
    def single_flight(self) -> bool:
        return self.config.single_flight

    @synchronized
    def configure(self, config: Union[ConfigSection, dict, None] = None, **kwargs) -> CacheContext:
        """Update this context's config with the given options."""
        self.config.update(config, **kwargs)
        return self

    # endregion

    @contextmanager
    def key_lock(self, key: str):
        """
        Hold the lock for the given cache key so that only one thread at a time computes the value for it.  Threads
        that were waiting for the lock should check the store again before computing the value themselves.

        The lock for a key is discarded only after every thread that requested it (including re-entrant requests from
        the same thread) has released it, so a thread that arrives while others are waiting shares the same lock.
        """
        with self._key_locks_lock:
            try:
                entry = self._key_locks[key]
            except KeyError:
                self._key_locks[key] = entry = [RLock(), 0]
            entry[1] += 1

        lock = entry[0]
        try:
            with lock:
                yield
        finally:
            with self._key_locks_lock:
                entry[1] -= 1
                if not entry[1]:
                    del self._key_locks[key]

    def __repr__(self) -> str:
        return f'<{self.__class__.__name__}[store={self._store!r}, {self.config!r}]>'


def default_context() -> CacheContext:
    """Get the default context, creating it if necessary."""
    global _default_context
    with _default_lock:
        if _default_context is None:
            _default_context = CacheContext()
        return _default_context


def set_default_context(context: Optional[CacheContext]):
    """Replace the default context.  If None is provided, then a new one will be created when it is next needed."""
    global _default_context
    with _default_lock:
        _default_context = context
