"""
FastAPI/ASGI application entrypoint.

Builds the app from environment settings; a missing DATABASE_URL is fatal here.
Run with: uvicorn shortstay_api.api_server.app:app --host 0.0.0.0 --port 3000
"""

from shortstay_api.api_server.server import create_app

app = create_app()

__all__ = ["app"]
