"""
Exceptions for the cacheable package

:author: Doug Skrypa
"""

__all__ = [
    'CacheableException',
    'NotAnObjectError',
    'StoreNotFoundError',
    'InvalidStoreError',
    'CacheKeyError',
    'ConfigException',
    'InvalidConfigError',
]


class CacheableException(Exception):
    """Base exception for errors raised by the cacheable package"""


class NotAnObjectError(CacheableException, TypeError):
    """Raised when a cache decorator target is neither an object nor the import path of a class"""

    def __init__(self, target):
        self.target = target

    def __str__(self) -> str:
        if isinstance(self.target, str):
            return f'Unable to wrap {self.target!r} - it is not the import path of a known class'
        return f'Unable to wrap {self.target!r} - the wrapped target must be an object or a class'


class StoreNotFoundError(CacheableException):
    """Raised when no cache store was provided and none could be created by a store factory"""

    def __str__(self) -> str:
        return 'No cache store is configured - set a store on the cache context or register a store factory'


class InvalidStoreError(CacheableException, TypeError):
    """
    Raised when a cache store does not provide the required ``get``, ``put``, and ``flush`` methods, or when its ``get``
    method cannot be called with a single key
    """

    def __init__(self, store, missing=(), reason: str = None):
        self.store = store
        self.missing = missing
        self.reason = reason

    def __str__(self) -> str:
        if self.reason:
            return f'Invalid cache store={self.store!r} - {self.reason}'
        missing = ', '.join(self.missing)
        return f'Invalid cache store={self.store!r} - it must provide callable get, put, and flush methods ({missing=})'


class CacheKeyError(CacheableException, TypeError):
    """Raised when the arguments for a cached call cannot be serialized to build a cache key"""

    def __init__(self, owner: str, method: str, error: Exception):
        self.owner = owner
        self.method = method
        self.error = error

    def __str__(self) -> str:
        return f'Unable to build a cache key for {self.owner}.{self.method}: {self.error}'


class ConfigException(CacheableException):
    """Base exception for config-related errors"""


class InvalidConfigError(ConfigException):
    """Raised when invalid config items are provided when initializing or updating a ConfigSection"""
