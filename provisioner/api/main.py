"""
FastAPI Application

This is the main FastAPI application. It exposes the Azure DevOps, GitHub
and Jira provisioning routes behind one REST facade.

Usage:
    Run with: uvicorn provisioner.api.main:app --reload
    API docs: http://localhost:8000/docs
"""

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from provisioner import __version__
from provisioner.api.azure_devops_routes import router as azure_devops_router
from provisioner.api.github_routes import router as github_router
from provisioner.api.jira_routes import router as jira_router
from provisioner.config import missing_settings, settings, validate_settings
from provisioner.errors import ConfigurationError

# Set up logging
logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title="Repository & Board Provisioning API",
    description="""
    REST facade for provisioning repositories and project boards.

    ## Features

    * **Azure DevOps** - Create, delete and rename Git repositories
    * **GitHub** - Create repositories (plain or from a template) and list them
    * **Jira** - Provision a project, filter and Scrum board in one call
    """,
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(azure_devops_router)
app.include_router(github_router)
app.include_router(jira_router)


@app.exception_handler(ConfigurationError)
async def configuration_error_handler(request: Request, exc: ConfigurationError):
    """A provider was called without its credentials configured."""
    logger.error(f"❌ {request.method} {request.url.path}: {exc.message}")
    return JSONResponse(
        status_code=503,
        content={"detail": {"error": "Not Configured", "message": exc.message}},
    )


@app.get("/")
async def root():
    """
    Root endpoint.

    Returns basic information about the API.
    """
    return {
        "message": "Repository & Board Provisioning API",
        "version": __version__,
        "status": "operational",
        "docs": "/docs",
        "health": "/health"
    }


@app.get("/health")
async def health_check():
    """
    Health check endpoint.

    Reports which providers have their configuration in place. It does not
    call any upstream API; use /jira/test-connection for that.
    """
    missing = set(missing_settings(settings))
    return {
        "status": "healthy",
        "api": "operational",
        "azure_devops_configured": not {"AZURE_DEVOPS_ORG", "AZURE_DEVOPS_PAT"} & missing,
        "github_configured": "GITHUB_PERSONAL_ACCESS_TOKEN" not in missing,
        "jira_configured": not {"JIRA_BASE_URL", "JIRA_EMAIL", "JIRA_API_TOKEN"} & missing,
    }


@app.on_event("startup")
async def startup_event():
    """
    Run when the API starts up.

    Missing credentials are only warnings: each provider fails on its own
    routes until configured.
    """
    logger.info("🚀 Starting Repository & Board Provisioning API")
    logger.info(f"📍 Listening on: {settings.api_host}:{settings.api_port}")

    try:
        validate_settings(settings)
        logger.info("✅ Configuration validated successfully")
    except ValueError as e:
        logger.warning(f"⚠️  Configuration warning: {e}")


@app.on_event("shutdown")
async def shutdown_event():
    logger.info("👋 Shutting down Repository & Board Provisioning API")


if __name__ == "__main__":
    # This allows running with: python -m provisioner.api.main
    import uvicorn
    uvicorn.run(
        "provisioner.api.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=True
    )
