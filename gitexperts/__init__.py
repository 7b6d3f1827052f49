"""
git-experts - find the people who know a file best.

Ranks the authors of a file (or of some of its lines) by combining
git blame with commit metadata under configurable weights.

For the library API, see the blame subpackage.
"""

__version__ = "0.1.0"
