"""
Memoization of method calls on any object or class.  Results are stored in the store of a :class:`CacheContext`, keyed
by the wrapped class, the method name, and the call's arguments.

:author: Doug Skrypa
"""

from .config import CacheConfig, GLOBAL_CACHE_MINUTES
from .context import CacheContext, default_context, set_default_context
from .decorate import cache_result
from .decorator import CacheDecorator
from .exceptions import CacheableException, NotAnObjectError, StoreNotFoundError, InvalidStoreError, CacheKeyError
from .mixins import Cacheable
from .stores import CacheStore, MemoryStore, MappingStore, set_store_factory
