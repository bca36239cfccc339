"""
FastAPI application serving the Hello World contract.
Follows SIMPLICITY and RELIABILITY principles.
"""
from typing import Optional

from fastapi import FastAPI
from fastapi.responses import PlainTextResponse

from hello_world.config import Settings, get_settings

HELLO_WORLD_BODY = "Hello World\n"


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the application; settings default to the environment."""
    settings = settings or get_settings()
    app = FastAPI(title="Hello World API", version="1.0.0")

    @app.get("/", response_class=PlainTextResponse)
    async def root():
        """Root endpoint returning the hello world line."""
        return PlainTextResponse(HELLO_WORLD_BODY)

    @app.get("/health")
    async def health_check():
        """Health check endpoint for service monitoring."""
        return {"status": "healthy", "service": settings.service_name}

    return app


app = create_app()
