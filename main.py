"""
Development entry point: serves the API with uvicorn on the configured
host and port (PORT, default 5055).

    python main.py
"""

import uvicorn

from config import AppSettings

if __name__ == "__main__":
    settings = AppSettings()
    uvicorn.run(
        "asgi:app",
        host=settings.host,
        port=settings.port,
        reload=not settings.is_production,
    )
