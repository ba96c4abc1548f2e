"""
Mixin that gives classes access to cache decorators for themselves and their instances.

Example::

    >>> class Widget(Cacheable):
    ...     def price(self, sku):
    ...         return expensive_lookup(sku)
    ...
    ...     @classmethod
    ...     def catalog(cls):
    ...         return expensive_catalog_lookup()
    ...
    >>> Widget().cache().price('A1')
    >>> Widget.cache_static(5).catalog()

:author: Doug Skrypa
"""

from __future__ import annotations

from typing import Optional, Union

from .context import CacheContext, default_context
from .decorator import CacheDecorator

__all__ = ['Cacheable']

Minutes = Union[int, float]


class Cacheable:
    __slots__ = ()
    _cache_context_: Optional[CacheContext] = None

    def __init_subclass__(cls, cache_context: CacheContext = None, **kwargs):
        """
        :param cache_context: The :class:`CacheContext<cacheable.context.CacheContext>` that decorators for this
          class and its instances should use (default: inherited from the parent class, or the default context)
        """
        super().__init_subclass__(**kwargs)
        if cache_context is not None:
            cls._cache_context_ = cache_context

    @classmethod
    def _get_cache_context_(cls) -> CacheContext:
        return cls._cache_context_ or default_context()

    def cache(self, minutes: Minutes = None) -> CacheDecorator:
        """
        :param minutes: The number of minutes to cache the result of the next call made through the returned decorator
        :return: The cache decorator that wraps this object
        """
        return self._get_cache_context_().registry.for_instance(self).set_cache_minutes(minutes)

    @classmethod
    def cache_static(cls, minutes: Minutes = None) -> CacheDecorator:
        """
        :param minutes: The number of minutes to cache the result of the next call made through the returned decorator
        :return: The cache decorator that wraps this class, for calling class methods and static methods
        """
        return cls._get_cache_context_().registry.for_type(cls).set_cache_minutes(minutes)
