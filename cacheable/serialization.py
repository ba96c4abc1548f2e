"""
Helpers for serializing call arguments to JSON for use in cache keys

:author: Doug Skrypa
"""

import json
from base64 import b64encode
from collections.abc import Mapping, KeysView, ValuesView
from dataclasses import is_dataclass, asdict
from datetime import datetime, date, time, timedelta
from decimal import Decimal
from enum import Enum
from pathlib import PurePath
from uuid import UUID

__all__ = ['CacheKeyEncoder', 'dump_args', 'dump_kwargs', 'type_name']


def type_name(cls: type) -> str:
    """The fully-qualified name of the given class, e.g. ``'package.module.ClassName'``."""
    return f'{cls.__module__}.{cls.__qualname__}'


class CacheKeyEncoder(json.JSONEncoder):
    """
    JSON encoder that produces a stable representation of common argument types.  Objects may control how they are
    represented in cache keys by defining a ``__cache_key__`` method that returns a JSON-serializable value.
    """

    def default(self, o):
        if hasattr(o, '__cache_key__'):
            return o.__cache_key__()
        elif isinstance(o, Enum):
            return o.value
        elif isinstance(o, (set, frozenset, KeysView)):
            return sorted(o)
        elif isinstance(o, ValuesView):
            return list(o)
        elif isinstance(o, Mapping):
            return dict(o)
        elif isinstance(o, bytes):
            try:
                return o.decode('utf-8')
            except UnicodeDecodeError:
                return b64encode(o).decode('utf-8')
        elif isinstance(o, (datetime, date, time)):
            return o.isoformat()
        elif isinstance(o, (timedelta, Decimal, UUID, PurePath)):
            return str(o)
        elif isinstance(o, type):
            return type_name(o)
        elif is_dataclass(o):
            return asdict(o)
        return super().default(o)


def dump_args(args) -> str:
    """Compact JSON list for positional arguments, e.g. ``[]`` or ``["test",1]``."""
    return json.dumps(list(args), cls=CacheKeyEncoder, separators=(',', ':'))


def dump_kwargs(kwargs) -> str:
    """Compact JSON object with sorted keys for keyword arguments."""
    return json.dumps(kwargs, cls=CacheKeyEncoder, separators=(',', ':'), sort_keys=True)
