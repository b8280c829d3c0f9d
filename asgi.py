"""
ASGI entry point.

Run with:
    uvicorn asgi:app --host 0.0.0.0 --port 5055
"""

from app import create_app

app = create_app()
