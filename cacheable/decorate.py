"""
A function decorator that caches results in a :class:`CacheContext<cacheable.context.CacheContext>` store.

Methods decorated with :func:`cache_result` share cache keys with calls made through the
:class:`CacheDecorator<cacheable.decorator.CacheDecorator>` for the same class, so the following are equivalent::

    >>> class Widget(Cacheable):
    ...     @cache_result(10)
    ...     def price(self, sku):
    ...         ...
    ...
    >>> Widget().price('A1')
    >>> Widget().cache(10).price('A1')

:author: Doug Skrypa
"""

from __future__ import annotations

import logging
from typing import Callable, TypeVar, Union

from wrapt import decorator as wrapt_decorator

from .config import cache_minutes
from .context import CacheContext, default_context
from .decorator import CacheDecorator

__all__ = ['cache_result']
log = logging.getLogger(__name__)

T = TypeVar('T')
Minutes = Union[int, float]


def cache_result(
    minutes: Minutes = None, *, context: CacheContext = None, name: str = None
) -> Callable[[Callable[..., T]], Callable[..., T]]:
    """
    Decorator for functions, methods, class methods, and static methods whose results should be cached.

    :param minutes: The number of minutes to cache results (default: the context's global minutes)
    :param context: The context to use.  If not specified, then methods of
      :class:`Cacheable<cacheable.mixins.Cacheable>` classes use their class's context, and everything else uses the
      default context.
    :param name: Name to use in cache keys in place of the function's name
    """
    cache_minutes(minutes, allow_none=True)

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        # Functions and static methods are identified by their module and qualified name
        func_decorator = CacheDecorator(func, context, owner=getattr(func, '__module__', None) or '__main__')

        @wrapt_decorator
        def wrapper(wrapped, instance, args, kwargs):
            if instance is None:
                func_name = name or wrapped.__qualname__
                return func_decorator._call(func_name, wrapped, args, kwargs, minutes)  # noqa
            cache_decorator = _decorator_for(instance, context)
            return cache_decorator._call(name or wrapped.__name__, wrapped, args, kwargs, minutes)  # noqa

        return wrapper(func)

    return decorator


def _decorator_for(instance, context: CacheContext = None) -> CacheDecorator:
    if context is None:
        try:
            context = instance._get_cache_context_()
        except AttributeError:
            context = default_context()

    if isinstance(instance, type):
        return context.registry.for_type(instance)
    return context.registry.for_instance(instance)
