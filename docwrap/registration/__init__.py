"""
Registration module

A DocumentRegistry records which collection each Document class is bound to and which observers run around its
persistence operations. Registries are explicit: create one while setting up your models and hand it to the repositories.
"""

from .document_registry import DocumentRegistry
