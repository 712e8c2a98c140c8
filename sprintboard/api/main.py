"""
FastAPI Application

This is the HTTP surface of the sprint dashboard. The UI calls it to list
repositories, load backlog statistics and sprint details, and export
sprint tables.

Usage:
    Run with: uvicorn sprintboard.api.main:app --reload
    API docs: http://localhost:8000/docs
"""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sprintboard import __version__
from sprintboard.config import settings
from sprintboard.errors import DashboardError
import logging

# Set up logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title="Sprint Dashboard",
    description="""
    Backlog and sprint views over GitHub issues and Projects (v2).

    ## Features

    * **Repositories** - Repositories the signed-in user contributes to
    * **Backlog Stats** - New, labeled and completed PBIs over the last 30 days
    * **Sprint Details** - Items of one sprint on the active project board
    * **Export** - Sprint tables as Markdown or HTML for the clipboard
    """,
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
)

# Add CORS middleware (allows the UI to call the API from another origin)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(DashboardError)
async def dashboard_error_handler(request: Request, exc: DashboardError):
    """Render every dashboard failure as ``{"error": message}``."""
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    """Malformed query parameters are a 400, not FastAPI's default 422."""
    problems = "; ".join(
        f"{'.'.join(str(part) for part in err['loc'][1:])}: {err['msg']}"
        for err in exc.errors()
    )
    return JSONResponse(status_code=400, content={"error": f"Invalid request: {problems}"})


# Import and include routers
from sprintboard.api.routes import router as api_router
app.include_router(api_router, tags=["dashboard"])


@app.get("/health")
async def health_check():
    """
    Health check endpoint.

    Returns the health status of the API and its configuration.
    """
    return {
        "status": "healthy",
        "version": __version__,
        "fallback_token_configured": bool(settings.github_token),
    }


@app.on_event("startup")
async def startup_event():
    """
    Run when the API starts up.

    Performs initialization and validation.
    """
    logger.info("🚀 Starting Sprint Dashboard API")
    logger.info(f"🔗 GitHub API: {settings.github_api_url}")

    # Validate configuration; an invalid one stops the server
    from sprintboard.config import validate_settings
    try:
        validate_settings()
    except ValueError as e:
        logger.error(f"❌ Invalid configuration: {e}")
        raise
    logger.info("✅ Configuration validated successfully")


@app.on_event("shutdown")
async def shutdown_event():
    """
    Run when the API shuts down.
    """
    logger.info("👋 Shutting down Sprint Dashboard API")


def run():
    """Console entry point: serve the API with uvicorn."""
    import uvicorn
    uvicorn.run(
        "sprintboard.api.main:app",
        host=settings.api_host,
        port=settings.api_port,
    )


if __name__ == "__main__":
    # This allows running with: python -m sprintboard.api.main
    run()
