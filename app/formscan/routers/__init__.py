"""
Routers package for FastAPI endpoints.

Organized by domain:
- upload: form upload and processing
- feedback: listing of stored records
"""

from . import feedback, upload

__all__ = ["feedback", "upload"]
