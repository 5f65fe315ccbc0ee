"""
Repository module

A Repository binds one Document class to its MongoDB collection. It runs validation and observer hooks around
inserts, updates and removes, and returns lazy Cursors for queries.
"""

from .cursor import Cursor
from .operation_result import OperationResult, OperationStatus
from .repository import Repository, is_constraint_violation
