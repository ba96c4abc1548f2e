#!/usr/bin/env python

from unittest import TestCase, main

from cacheable.config import ConfigItem, ConfigSection, CacheConfig, GLOBAL_CACHE_MINUTES, cache_minutes
from cacheable.exceptions import InvalidConfigError


class ConfigTest(TestCase):
    # Note: noqa comments on assertIn / assertNotIn checks are present
    # because PyCharm doesn't seem to understand __contains__ well

    def test_repr(self):
        class Config(ConfigSection):
            foo = ConfigItem(123)

        self.assertIn('123,', repr(Config.foo))
        self.assertEqual('<Config(foo=1)>', repr(Config(foo=1)))

    def test_update_empty(self):
        class Config(ConfigSection):
            foo = ConfigItem(123)

        config = Config({'foo': 456})
        config.update()
        self.assertEqual(456, config.foo)

    def test_kwargs_override_mapping(self):
        class Config(ConfigSection):
            foo = ConfigItem(1)
            bar = ConfigItem(2)

        config = Config({'foo': 3, 'bar': 4}, bar=5)
        self.assertEqual((3, 5), (config.foo, config.bar))

    def test_update_from_section(self):
        config = CacheConfig()
        config.update(CacheConfig(prefix='abc'))
        self.assertEqual('abc', config.prefix)
        self.assertEqual(GLOBAL_CACHE_MINUTES, config.global_minutes)
        self.assertNotIn('global_minutes', config)  # noqa

    def test_unsupported_keys_rejected_before_changes(self):
        config = CacheConfig()
        with self.assertRaisesRegex(InvalidConfigError, 'unsupported options: bar, foo'):
            config.update(prefix='abc', foo=1, bar=2)
        self.assertEqual('', config.prefix)

    def test_type_conversion(self):
        config = CacheConfig(prefix=123, cache_falsy=0)
        self.assertEqual('123', config.prefix)
        self.assertIs(False, config.cache_falsy)

    def test_invalid_minutes(self):
        for minutes in (0, -5, 'abc', None, True):
            with self.subTest(minutes=minutes), self.assertRaises(InvalidConfigError):
                CacheConfig(global_minutes=minutes)

    def test_inheritance(self):
        class Config(CacheConfig):
            extra = ConfigItem(None)

        self.assertEqual({'prefix', 'global_minutes', 'cache_falsy', 'single_flight', 'extra'}, set(Config._config_items_))
        self.assertEqual({'prefix', 'global_minutes', 'cache_falsy', 'single_flight'}, set(CacheConfig._config_items_))

    def test_reset_and_delete(self):
        config = CacheConfig(prefix='abc', global_minutes=5)
        self.assertIn('prefix', config)  # noqa
        del config.prefix
        self.assertNotIn('prefix', config)  # noqa
        self.assertEqual('', config.prefix)
        with self.assertRaises(AttributeError):
            del config.prefix
        config.reset()
        self.assertEqual(GLOBAL_CACHE_MINUTES, config.global_minutes)
        self.assertEqual({}, config.as_dict(False))

    def test_item_access(self):
        config = CacheConfig()
        config['prefix'] = 'abc'
        self.assertEqual('abc', config['prefix'])
        with self.assertRaises(KeyError):
            config['foo']  # noqa
        with self.assertRaises(KeyError):
            config['foo'] = 1
        expected = {'prefix': 'abc', 'global_minutes': 60, 'cache_falsy': True, 'single_flight': True}
        self.assertEqual(expected, config.as_dict())

    def test_cache_minutes(self):
        self.assertEqual(5, cache_minutes(5))
        self.assertEqual(0.5, cache_minutes(0.5))
        self.assertIsNone(cache_minutes(None, allow_none=True))
        with self.assertRaises(ValueError):
            cache_minutes(None)


if __name__ == '__main__':
    main(verbosity=2)
