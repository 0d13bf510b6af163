"""
Infrastructure layer for jrn.

Contains abstractions for external systems:
- EditorLauncher: Runs the user's editor on an entry file

These provide clean interfaces that can be mocked for testing.
"""

from .editor import EditorLauncher

__all__ = [
    'EditorLauncher',
]
