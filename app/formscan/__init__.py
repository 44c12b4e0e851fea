"""
Feedback Form Digitizer Backend Application.

A FastAPI service that digitizes photographed feedback forms: it stores the
image, extracts structured fields with a vision model (OpenAI), persists the
record and mirrors a summary row into Google Sheets.
"""

__version__ = "1.0.0"
