"""
Cache key derivation.

Keys are built from the fully-qualified name of the wrapped type, the method name, and the JSON-serialized arguments,
hashed with SHA-256 and prefixed with the configured key prefix.  The key does not depend on the identity of the wrapped
instance, so separate instances of the same class share cached values for the same method and arguments.

:author: Doug Skrypa
"""

from hashlib import sha256
from typing import Any, Mapping, Sequence

from .exceptions import CacheKeyError
from .serialization import dump_args, dump_kwargs

__all__ = ['make_cache_key', 'key_source']


def key_source(owner: str, method: str, args: Sequence[Any] = (), kwargs: Mapping[str, Any] = None) -> str:
    """
    :param owner: The fully-qualified name of the class that owns the method
    :param method: The name of the method being called
    :param args: Positional arguments for the call
    :param kwargs: Keyword arguments for the call
    :return: The un-hashed string that identifies the call
    """
    try:
        source = f'{owner}{method}{dump_args(args)}'
        if kwargs:
            source += dump_kwargs(kwargs)
    except (TypeError, ValueError) as e:
        raise CacheKeyError(owner, method, e) from e
    return source


def make_cache_key(
    prefix: str, owner: str, method: str, args: Sequence[Any] = (), kwargs: Mapping[str, Any] = None
) -> str:
    digest = sha256(key_source(owner, method, args, kwargs).encode('utf-8')).hexdigest()
    return f'{prefix}{digest}'
