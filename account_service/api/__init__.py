"""
Account Service API Application Factory
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import uvicorn

from .accounts import router as accounts_router
from .commissions import router as commissions_router
from .reporting import router as reporting_router
from .dependencies import shutdown_account_system
from .. import __version__
from ..config import get_config
from ..errors import AccountServiceError, InternalError
from ..logging_config import get_logger, setup_logging

logger = get_logger("account_service.api")


@asynccontextmanager
async def lifespan(app: FastAPI):
    config = get_config()
    setup_logging(config.log_level, config.log_format)
    yield
    await shutdown_account_system()


async def handle_service_error(request: Request, exc: AccountServiceError) -> JSONResponse:
    """Map the error taxonomy onto HTTP status codes"""
    if isinstance(exc, InternalError):
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    else:
        logger.warning(f"{request.method} {request.url.path} rejected: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


def create_app() -> FastAPI:
    """Create and configure the FastAPI application"""
    app = FastAPI(
        title="Account Service API",
        description="Customer accounts, commission-tiered transactions and reports",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(AccountServiceError, handle_service_error)

    app.include_router(accounts_router, prefix="/accounts", tags=["Accounts"])
    app.include_router(commissions_router, prefix="/commissions", tags=["Commissions"])
    app.include_router(reporting_router, prefix="/reports", tags=["Reports"])

    @app.get("/health")
    async def health_check():
        """Health check endpoint"""
        return {
            "status": "healthy",
            "service": "account_service",
            "version": __version__
        }

    @app.get("/")
    async def get_api_info():
        """Get API information"""
        return {
            "name": "Account Service API",
            "version": __version__,
            "endpoints": {
                "docs": "/docs",
                "health": "/health",
                "accounts": "/accounts",
                "commissions": "/commissions",
                "reports": "/reports",
            }
        }

    return app


app = create_app()


def run_server(host: str = "0.0.0.0", port: int = 8085, debug: bool = False):
    """Run the API server"""
    uvicorn.run(
        "account_service.api:app",
        host=host,
        port=port,
        reload=debug,
        log_level="debug" if debug else "info"
    )
