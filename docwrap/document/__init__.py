"""
Document module for the in-memory side of the mapping.

This module provides functionality for:
- The Document wrapper and its lifecycle state machine
- Document identities
- The default MongoDB connection used by Documents
"""
