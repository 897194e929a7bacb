"""
Middleware package exports.
"""

from middleware.request_id import RequestIDMiddleware

__all__ = ["RequestIDMiddleware"]
