"""FastAPI application entry point."""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from papertrade import __version__
from papertrade.api.routers import portfolio_router, transactions_router, sync_router
from papertrade.app_context import AppContext
from papertrade.config.logging_config import setup_logging
from papertrade.config.settings import get_settings
from papertrade.core.exceptions import AppError


def create_app(context: Optional[AppContext] = None) -> FastAPI:
    """Build the API around an AppContext (created at startup when not given)."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan handler."""
        ctx = context or AppContext(get_settings())
        setup_logging(ctx.settings)
        app.state.context = ctx
        await ctx.startup()
        yield
        await ctx.shutdown()

    settings = context.settings if context else get_settings()
    app = FastAPI(
        title=settings.app_name,
        description="Paper-trading portfolio ledger with offline-first persistence",
        version=__version__,
        lifespan=lifespan,
    )

    app.include_router(portfolio_router)
    app.include_router(transactions_router)
    app.include_router(sync_router)

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
        """Global handler for application errors."""
        return JSONResponse(
            status_code=400,
            content={"error": exc.code, "message": exc.message, "details": exc.details},
        )

    @app.get("/health")
    def health_check(request: Request) -> dict:
        """Health check endpoint with local queue depth."""
        ctx: AppContext = request.app.state.context
        return {
            "status": "healthy",
            "pending_transactions": len(ctx.queue),
            "advisory": ctx.session.permission_advisory,
        }

    @app.get("/")
    def root() -> dict[str, str]:
        """Root endpoint with API info."""
        return {
            "app": settings.app_name,
            "version": __version__,
            "docs": "/docs",
        }

    return app


app = create_app()
