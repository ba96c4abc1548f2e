"""
A decorator (in the design pattern sense) that memoizes the results of method calls on the object or class that it
wraps.  Results are stored in the store of a :class:`CacheContext<cacheable.context.CacheContext>`, keyed by the
wrapped type, the method name, and the arguments::

    >>> decorator = CacheDecorator(widget)
    >>> decorator.price('A1')          # calls widget.price('A1') and stores the result
    >>> decorator.price('A1')          # returns the stored result without calling widget.price

:author: Doug Skrypa
"""

from __future__ import annotations

import logging
from functools import partial
from importlib import import_module
from typing import TYPE_CHECKING, Any, Callable, Optional, Union

from .config import cache_minutes
from .exceptions import NotAnObjectError
from .keys import make_cache_key
from .serialization import type_name

if TYPE_CHECKING:
    from .context import CacheContext
    from .stores import CacheStore

__all__ = ['CacheDecorator', 'resolve_type']
log = logging.getLogger(__name__)

Minutes = Union[int, float]
_NotSet = object()


def resolve_type(path: str) -> type:
    """
    Resolve a class from its import path, e.g. ``'package.module.ClassName'`` or ``'package.module.Outer.Inner'``.  Names
    without a module, such as ``'dict'``, are resolved from :mod:`builtins`.

    :param path: The fully-qualified name of a class
    :return: The class with the given name
    :raises: :class:`NotAnObjectError` if the path does not refer to a class that can be imported
    """
    parts = path.split('.')
    if len(parts) == 1:
        parts.insert(0, 'builtins')
    for i in range(len(parts) - 1, 0, -1):
        try:
            obj = import_module('.'.join(parts[:i]))
        except (ImportError, TypeError, ValueError):
            continue
        try:
            for attr in parts[i:]:
                obj = getattr(obj, attr)
        except AttributeError:
            continue
        if isinstance(obj, type):
            return obj
        break

    raise NotAnObjectError(path)


class CacheDecorator:
    """
    Methods of the wrapped target are called through attribute access on the decorator, e.g. ``decorator.price('A1')``.
    Target methods that share a name with an attribute of the decorator itself (such as ``call``, ``invoke``, ``target``,
    ``owner``, ``context``, or ``get_cache_key``) are not reachable that way; use ``decorator.invoke('call', ...)`` for
    those.
    """

    __slots__ = ('_target', '_owner', '_minutes', '_default_minutes', '_context')

    def __init__(self, target: Any, context: CacheContext = None, *, owner: str = None):
        """
        :param target: The object or class whose method calls should be cached, or the import path of a class
        :param context: The :class:`CacheContext<cacheable.context.CacheContext>` that provides the store and shared
          settings (default: the default context)
        :param owner: Name to use in place of the fully-qualified name of the target's class in cache keys
        """
        if target is None:
            raise NotAnObjectError(target)
        elif isinstance(target, str):
            target = resolve_type(target)

        self._target = target
        self._owner = owner or type_name(target if isinstance(target, type) else target.__class__)
        self._minutes: Optional[Minutes] = None
        self._default_minutes: Optional[Minutes] = None
        self._context = context

    @property
    def target(self):
        """The wrapped object or class."""
        return self._target

    @property
    def owner(self) -> str:
        """The fully-qualified name of the wrapped class, or the class of the wrapped object."""
        return self._owner

    @property
    def context(self) -> CacheContext:
        if self._context is None:
            from .context import default_context

            return default_context()
        return self._context

    # region Cache Minutes

    def get_cache_minutes(self) -> Minutes:
        """
        :return: The number of minutes that the result of the next call will be cached.  The one-shot value from
          :meth:`.set_cache_minutes` takes precedence over the default from :meth:`.set_default_cache_minutes`, which
          takes precedence over the context's global minutes.
        """
        if self._minutes is not None:
            return self._minutes
        elif self._default_minutes is not None:
            return self._default_minutes
        return self.context.global_minutes

    def set_cache_minutes(self, minutes: Optional[Minutes]) -> CacheDecorator:
        """Set the number of minutes to cache the result of the next call only."""
        self._minutes = cache_minutes(minutes, allow_none=True)
        return self

    def set_default_cache_minutes(self, minutes: Optional[Minutes]) -> CacheDecorator:
        """Set the number of minutes to cache results of calls made through this decorator."""
        self._default_minutes = cache_minutes(minutes, allow_none=True)
        return self

    # endregion

    def get_cache_key(self, method: str, args=(), kwargs=None) -> str:
        return make_cache_key(self.context.prefix, self._owner, method, args, kwargs)

    def invoke(self, method: str, *args, **kwargs):
        """
        Call the named method on the wrapped object or class, or return the cached result of a previous call with the
        same arguments.
        """
        return self.call(method, getattr(self.target, method), *args, **kwargs)

    def call(self, name: str, func: Callable, *args, **kwargs):
        """
        Call the given function, or return the cached result of a previous call with the same name and arguments.

        :param name: A stable identifier for the function, used in place of a method name in the cache key
        :param func: The function to call if there is no cached value
        :param args: Positional arguments for the function
        :param kwargs: Keyword arguments for the function
        :return: The cached or newly computed result
        """
        return self._call(name, func, args, kwargs)

    def _call(self, name: str, func: Callable, args, kwargs, minutes: Minutes = None):
        """
        :param minutes: The number of minutes to cache a newly computed value.  When specified, it is used instead of
          the result of :meth:`.get_cache_minutes`, and the one-shot minutes for this decorator are left as-is.
        """
        clear_one_shot = minutes is None
        try:
            # Resolved before calling func, which may make a nested call through this decorator that clears the one-shot
            # minutes before this call stores its result
            if minutes is None:
                minutes = self.get_cache_minutes()
            context = self.context
            key = self.get_cache_key(name, args, kwargs)
            store = context.store
            if (value := self._get_cached_value(context, key)) is not _NotSet:
                log.log(9, f'Returning cached value for {self._owner}.{name} with {key=}')
                return value
            elif context.single_flight:
                with context.key_lock(key):
                    # Another thread may have stored a value while this one was waiting for the lock
                    if (value := self._get_cached_value(context, key)) is not _NotSet:
                        return value
                    return self._get_and_store_new_value(store, key, name, func, args, kwargs, minutes)
            return self._get_and_store_new_value(store, key, name, func, args, kwargs, minutes)
        finally:
            if clear_one_shot:
                self._minutes = None

    @staticmethod
    def _get_cached_value(context: CacheContext, key: str):
        value = context.get_stored(key, _NotSet)
        if value is not _NotSet and not value and not context.cache_falsy:
            return _NotSet
        return value

    def _get_and_store_new_value(
        self, store: CacheStore, key: str, name: str, func: Callable, args, kwargs, minutes: Minutes
    ):
        value = func(*args, **kwargs)
        log.debug(f'Caching result of {self._owner}.{name} for {minutes=} with {key=}')
        store.put(key, value, minutes)
        return value

    def __getattr__(self, name: str):
        # Dunder lookups (copy / pickle protocols) and unset slots must not be treated as cached calls
        if name.startswith('__') or name in CacheDecorator.__slots__:
            raise AttributeError(name)
        if not callable(getattr(self.target, name)):
            raise AttributeError(f'{self._owner}.{name} is not callable, so its results cannot be cached')
        return partial(self.invoke, name)

    def __repr__(self) -> str:
        return f'<{self.__class__.__name__}[{self._owner}]>'
