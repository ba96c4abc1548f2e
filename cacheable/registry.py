"""
Registry that maps host objects and classes to the :class:`CacheDecorator<cacheable.decorator.CacheDecorator>` that
wraps them, so that exactly one decorator exists per host instance and per host class.

:author: Doug Skrypa
"""

from __future__ import annotations

import logging
from threading import RLock
from typing import TYPE_CHECKING

from cachetools import LRUCache

from .decorator import CacheDecorator

if TYPE_CHECKING:
    from .context import CacheContext

__all__ = ['DecoratorRegistry']
log = logging.getLogger(__name__)


class DecoratorRegistry:
    """
    Decorators for instances are stored in the instance's ``__dict__`` under a name that is unique to this registry, so
    they share the lifetime of the instance, and a decorator cycle does not prevent the instance from being garbage
    collected.  Instances without a ``__dict__`` (i.e., classes that define ``__slots__``) are tracked by ``id`` in a
    bounded LRU cache until :meth:`.discard` or :meth:`.clear` is called, or until they are evicted by decorators for
    more recently used slotted instances.  An evicted host receives a new decorator the next time one is requested, so
    any default minutes that were set on its previous decorator are lost.

    :param context: The context that decorators created by this registry should use
    :param slotted_maxsize: The maximum number of decorators for instances without a ``__dict__`` to keep
    """

    def __init__(self, context: CacheContext, slotted_maxsize: int = 1024):
        self.context = context
        self._lock = RLock()
        self._attr = f'_cache_decorator_{id(self):x}'
        self._slotted_decorators: LRUCache[int, CacheDecorator] = LRUCache(slotted_maxsize)
        self._type_decorators: dict[type, CacheDecorator] = {}

    def for_instance(self, host) -> CacheDecorator:
        """Get or create the decorator that wraps the given object."""
        try:
            host_dict = vars(host)
        except TypeError:
            return self._for_slotted_instance(host)

        try:
            return host_dict[self._attr]
        except KeyError:
            pass

        with self._lock:  # Another thread may have created it while this one was waiting for the lock
            if (decorator := host_dict.get(self._attr)) is None:
                log.log(9, f'Registering new cache decorator for {host.__class__.__name__} object')
                host_dict[self._attr] = decorator = CacheDecorator(host, self.context)
            return decorator

    def _for_slotted_instance(self, host) -> CacheDecorator:
        with self._lock:
            try:
                return self._slotted_decorators[id(host)]
            except KeyError:
                self._slotted_decorators[id(host)] = decorator = CacheDecorator(host, self.context)
                return decorator

    def for_type(self, cls: type) -> CacheDecorator:
        """Get or create the decorator that wraps the given class."""
        with self._lock:
            try:
                return self._type_decorators[cls]
            except KeyError:
                self._type_decorators[cls] = decorator = CacheDecorator(cls, self.context)
                return decorator

    def discard(self, host):
        """Remove the decorator for the given object or class, if one exists."""
        with self._lock:
            if isinstance(host, type):
                self._type_decorators.pop(host, None)
                return
            try:
                vars(host).pop(self._attr, None)
            except TypeError:
                self._slotted_decorators.pop(id(host), None)

    def clear(self):
        """Forget the decorators for all classes and all objects that do not have a ``__dict__``."""
        with self._lock:
            self._slotted_decorators.clear()
            self._type_decorators.clear()
