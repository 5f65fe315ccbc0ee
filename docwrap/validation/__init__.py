"""
Validation module

Documents validate themselves by overriding Document.validate(). Failures are collected into an ErrorCollector,
either directly with errors.add() or through the Expectations checks.
"""

from .error_collector import ErrorCollector, ErrorEntry
from .expectations import Expectations
