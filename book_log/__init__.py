"""
Top-level package for Book Log, a personal reading log.

All functionality lives in submodules under ``app``.
"""

__all__ = []
