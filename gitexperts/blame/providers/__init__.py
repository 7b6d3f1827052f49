"""
Providers package for history extraction.

This package contains the abstract history provider and its
git-backed and in-memory implementations.
"""

from .base import HistoryProvider
from .local_git import LocalGitProvider
from .static import StaticHistoryProvider

__all__ = ['HistoryProvider', 'LocalGitProvider', 'StaticHistoryProvider']
