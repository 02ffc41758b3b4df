"""FastAPI application."""

from fastapi import FastAPI

from nexusone.app.api.routes.chat import router as chat_router
from nexusone.app.api.routes.health import router as health_router
from nexusone.app.api.routes.metrics import router as metrics_router
from nexusone.app.api.routes.onboarding import router as onboarding_router
from nexusone.app.api.routes.policies import router as policies_router
from nexusone.app.config import get_settings
from nexusone.app.utils.logging import configure_logging

configure_logging(get_settings().log_level)

app = FastAPI(title="NexusOne API", version="0.1.0")

# Register routes
app.include_router(health_router, tags=["health"])
app.include_router(metrics_router, tags=["metrics"])
app.include_router(policies_router, tags=["policies"])
app.include_router(chat_router, tags=["onboarding"])
app.include_router(onboarding_router, tags=["onboarding"])


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint."""
    return {"message": "NexusOne API", "version": "0.1.0"}
