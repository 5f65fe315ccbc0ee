"""
docwrap: an object-document mapper for MongoDB.

Define Documents, validate them with expectations, observe their lifecycle, and persist and query them through
Repositories. Query and update expressions are passed through to pymongo untouched.
"""

from .document.document import Document
from .document.document_id import DocumentId
from .document.document_state import DocumentState
from .document.mongo_db import create_mongo_db, set_mongo_db
from .document.document_state import UpdateMethod
from .observing import Observer, ObserverChain
from .registration import DocumentRegistry
from .repository import Cursor, OperationResult, OperationStatus, Repository
from .typing import FieldPath, ValueKind, kind_of
from .utilities.errors import ConstraintViolation, DocwrapError, PreconditionViolation, SetupError, ValidationError
from .utilities.logger import set_log_level, set_logger
from .utilities.special_values import ABSTRACT
from .validation import ErrorCollector, ErrorEntry, Expectations
