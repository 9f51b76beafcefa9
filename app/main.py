"""
ASGI entry point for the Memoir storage API.

Run with any ASGI server, e.g. ``uvicorn app.main:app``.
"""

from memoir.api import create_app


app = create_app()
