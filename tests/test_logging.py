#!/usr/bin/env python

import logging
import unittest
from logging import LogRecord

from cacheable.logging import init_logging, stdout_level, create_filter, DatetimeFormatter, TRACE, VERBOSE

log = logging.getLogger(__name__)


class LoggingInitTest(unittest.TestCase):
    def _cleanup_handlers(self, *names):
        for name in names:
            logger = logging.getLogger(name)
            while logger.handlers:
                logger.handlers[0].close()
                del logger.handlers[0]

    def test_stdout_level(self):
        self.assertEqual(logging.INFO, stdout_level(0))
        self.assertEqual(logging.INFO, stdout_level(None))
        self.assertEqual(VERBOSE, stdout_level(1))
        self.assertEqual(logging.DEBUG, stdout_level(2))
        self.assertEqual(TRACE, stdout_level(3))
        self.assertEqual(logging.NOTSET, stdout_level(20))

    def test_level_names(self):
        init_logging(names='test_level_names', lvl_names={5: 'FINE'})
        self.assertEqual('TRACE', logging.getLevelName(TRACE))
        self.assertEqual('VERBOSE', logging.getLevelName(VERBOSE))
        self.assertEqual('FINE', logging.getLevelName(5))
        self._cleanup_handlers('test_level_names')

    def test_handlers(self):
        loggers = init_logging(2, names='test')
        self.assertEqual([logging.getLogger('test')], loggers)
        handlers = {handler.name: handler for handler in loggers[0].handlers}
        self.assertEqual({'stdout', 'stderr'}, set(handlers))
        self.assertEqual(logging.DEBUG, handlers['stdout'].level)

        info = LogRecord('test', logging.INFO, __file__, 1, 'info', None, None)
        warning = LogRecord('test', logging.WARNING, __file__, 1, 'warning', None, None)
        self.assertTrue(handlers['stdout'].filter(info))
        self.assertFalse(handlers['stdout'].filter(warning))
        self.assertFalse(handlers['stderr'].filter(info))
        self.assertTrue(handlers['stderr'].filter(warning))
        self._cleanup_handlers('test')

    def test_replace_handlers(self):
        init_logging(names=['test1', 'test2'])
        init_logging(names=['test1', 'test2'])
        self.assertEqual(2, len(logging.getLogger('test1').handlers))
        init_logging(names='test1', replace_handlers=False)
        self.assertEqual(4, len(logging.getLogger('test1').handlers))
        self._cleanup_handlers('test1', 'test2')

    def test_set_levels(self):
        init_logging(names='test', set_levels={'test.child': logging.ERROR})
        self.assertEqual(logging.ERROR, logging.getLogger('test.child').level)
        logging.getLogger('test.child').setLevel(logging.NOTSET)
        with self.assertRaises(TypeError):
            init_logging(names='test', set_levels=[('test.child', logging.ERROR)])
        self._cleanup_handlers('test')

    def test_create_filter(self):
        log_filter = create_filter(lambda r: r.name.startswith('cacheable'))
        self.assertTrue(log_filter.filter(LogRecord('cacheable.decorator', 10, __file__, 1, 'a', None, None)))
        self.assertFalse(log_filter.filter(LogRecord('other', 10, __file__, 1, 'a', None, None)))

    def test_datetime_format(self):
        formatter = DatetimeFormatter('%(asctime)s %(message)s', '%Y-%m-%d %H:%M:%S.%f')
        record = LogRecord('test', logging.INFO, __file__, 1, 'msg', None, None)
        record.created = 1709337600.5
        timestamp = formatter.formatTime(record, formatter.datefmt)
        self.assertRegex(timestamp, r'^\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}\.500000$')


if __name__ == '__main__':
    try:
        unittest.main(warnings='ignore', verbosity=2, exit=False)
    except KeyboardInterrupt:
        print()
