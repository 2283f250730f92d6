from contextlib import asynccontextmanager
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
import logging

from tinylink.core.config import settings
from tinylink.core.exceptions import LinkError
from tinylink.core.logging_config import configure_logging
from tinylink.api import links, redirect
from tinylink.db.Connection import database
from tinylink.routers import health

logger = configure_logging(settings.LOG_LEVEL)
logger.info(f"Application '{settings.PROJECT_NAME}' starting up.")


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Resolve through the overrides so tests can swap the store
    get_store = app.dependency_overrides.get(database.get_store, database.get_store)
    store = get_store()
    database.verify_store_connection(store)
    yield
    logger.info("Shutting down gracefully...")
    try:
        store.close()
    except Exception:
        logger.debug("Error closing record store")
    database.get_store.cache_clear()


app = FastAPI(
    title=settings.PROJECT_NAME,
    description="URL shortener: short codes, redirects and click counts",
    lifespan=lifespan,
)

# Order matters: the catch-all redirect route goes last
app.include_router(health.router)
app.include_router(links.router)
app.include_router(redirect.router)


@app.exception_handler(LinkError)
async def link_error_handler(request: Request, exc: LinkError):
    if exc.status_code >= 500:
        # Backend details stay in the log
        logger.error(f"Store failure on {request.method} {request.url.path}: {exc.message}")
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.default_message})
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.info(f"Rejected malformed request to {request.url.path}: {exc.errors()}")
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": "Invalid request body"})


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8080)
