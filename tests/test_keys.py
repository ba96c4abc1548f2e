#!/usr/bin/env python

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from hashlib import sha256
from pathlib import PurePosixPath
from unittest import TestCase, main
from uuid import UUID

from cacheable.exceptions import CacheKeyError
from cacheable.keys import key_source, make_cache_key
from cacheable.serialization import dump_args, dump_kwargs, type_name


class Color(Enum):
    RED = 'red'


@dataclass
class Point:
    x: int
    y: int


class Account:
    def __init__(self, account_id):
        self.account_id = account_id

    def __cache_key__(self):
        return {'account': self.account_id}


class KeySourceTest(TestCase):
    def test_no_args(self):
        self.assertEqual('pkg.Widgetprice[]', key_source('pkg.Widget', 'price'))

    def test_positional_args(self):
        self.assertEqual('pkg.Widgetprice["A1",2]', key_source('pkg.Widget', 'price', ('A1', 2)))

    def test_kwargs_are_sorted(self):
        expected = 'pkg.Widgetprice["A1"]{"a":1,"b":2}'
        self.assertEqual(expected, key_source('pkg.Widget', 'price', ['A1'], {'b': 2, 'a': 1}))
        self.assertEqual(expected, key_source('pkg.Widget', 'price', ['A1'], {'a': 1, 'b': 2}))

    def test_empty_kwargs_are_omitted(self):
        self.assertEqual(key_source('pkg.Widget', 'price'), key_source('pkg.Widget', 'price', (), {}))

    def test_unserializable(self):
        with self.assertRaises(CacheKeyError) as ctx:
            key_source('pkg.Widget', 'price', [object()])
        self.assertEqual(('pkg.Widget', 'price'), (ctx.exception.owner, ctx.exception.method))
        self.assertIsInstance(ctx.exception, TypeError)

    def test_circular_reference(self):
        data = []
        data.append(data)
        with self.assertRaises(CacheKeyError):
            key_source('pkg.Widget', 'price', [data])

    def test_make_cache_key(self):
        digest = sha256(b'pkg.Widgetprice["A1"]').hexdigest()
        self.assertEqual(digest, make_cache_key('', 'pkg.Widget', 'price', ['A1']))
        self.assertEqual(f'app_{digest}', make_cache_key('app_', 'pkg.Widget', 'price', ['A1']))
        self.assertEqual(64, len(make_cache_key('', 'pkg.Widget', 'price')))


class SerializationTest(TestCase):
    def test_type_name(self):
        self.assertEqual(f'{__name__}.Point', type_name(Point))
        self.assertEqual('builtins.dict', type_name(dict))

    def test_common_types(self):
        args = [
            Color.RED,
            {3, 1, 2},
            b'abc',
            date(2024, 3, 2),
            datetime(2024, 3, 2, 1, 2, 3),
            Decimal('1.5'),
            UUID(int=1),
            PurePosixPath('/tmp/a'),
            dict,
            Point(1, 2),
            Account(7),
        ]
        expected = (
            '["red",[1,2,3],"abc","2024-03-02","2024-03-02T01:02:03","1.5","00000000-0000-0000-0000-000000000001",'
            '"/tmp/a","builtins.dict",{"x":1,"y":2},{"account":7}]'
        )
        self.assertEqual(expected, dump_args(args))

    def test_non_utf8_bytes(self):
        self.assertEqual('["/w=="]', dump_args([b'\xff']))

    def test_dump_kwargs(self):
        self.assertEqual('{"a":{"b":1,"c":2},"d":null}', dump_kwargs({'d': None, 'a': {'c': 2, 'b': 1}}))


if __name__ == '__main__':
    main(verbosity=2)
