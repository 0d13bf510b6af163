"""
Service layer for jrn.

Contains the logic that coordinates domain objects and infrastructure:
- RepositoryIndex: Scan, list, create, tag and remove journal entries

Services are the primary API for commands to use.
"""

from .repository_index import RepositoryIndex

__all__ = [
    'RepositoryIndex',
]
