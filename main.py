from contextlib import asynccontextmanager

from fastapi import FastAPI

from ledgerdesk.core.config import settings
from ledgerdesk.core.database import init_db
from ledgerdesk.core.logging_config import setup_logging
from ledgerdesk.core.middleware import RequestContextMiddleware
from ledgerdesk.web.routes import api_import, health


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize app on startup."""
    setup_logging()
    await init_db()
    yield


def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.APP_NAME,
        description="Bank statement import and review",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.add_middleware(RequestContextMiddleware)

    # Include routers
    app.include_router(api_import.router, prefix="/api", tags=["import"])
    app.include_router(health.router, tags=["health"])
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)
