"""
Azure Resource Explorer - Main Module
Provides REST API endpoints for browsing and searching Azure resources
"""
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from .api import favorites, health, history, resources, subscriptions
from .utils import config, get_logger
from .utils.errors import (
    GatewayError,
    ResourceExplorerError,
    UnauthenticatedError,
    UnavailableError,
)

logger = get_logger(__name__, config.app.log_level)

app = FastAPI(
    title=config.app.title,
    version=config.app.version,
)

app.include_router(health.router)
app.include_router(subscriptions.router)
app.include_router(resources.router)
app.include_router(history.router)
app.include_router(favorites.router)


def _status_code_for(exc: ResourceExplorerError) -> int:
    if isinstance(exc, (UnavailableError, UnauthenticatedError)):
        return 503
    if isinstance(exc, GatewayError):
        return 502
    return 500


@app.exception_handler(ResourceExplorerError)
async def explorer_error_handler(request: Request, exc: ResourceExplorerError):
    """Render explorer errors with their title and remediation hint."""
    status_code = _status_code_for(exc)
    logger.warning("%s %s failed: %s (%s)", request.method, request.url.path, exc.title, exc.message)
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "data": None, "error": exc.to_dict()},
    )


@app.on_event("startup")
async def startup_event():
    """Log the effective configuration"""
    logger.info("🚀 Starting %s v%s", config.app.title, config.app.version)
    for key, value in config.get_environment_summary().items():
        logger.info("   - %s: %s", key, value)


def run() -> None:
    import uvicorn
    uvicorn.run(app, host="127.0.0.1", port=8000)


if __name__ == "__main__":
    run()
