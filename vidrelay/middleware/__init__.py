"""
Middleware package for VidRelay.
"""

from .error_handler import ErrorHandlingMiddleware

__all__ = ['ErrorHandlingMiddleware']
