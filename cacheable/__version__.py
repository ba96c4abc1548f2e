__title__ = 'cacheable'
__description__ = 'Memoization of method calls on any object or class, backed by a pluggable TTL cache store'
__version__ = '2024.03.02'
__author__ = 'Doug Skrypa'
