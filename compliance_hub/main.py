from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from fastapi.routing import APIRoute

from compliance_hub.core.config import settings
from compliance_hub.core.database import init_db
from compliance_hub.core.exceptions import (
    ComplianceHubError,
    ImportFileError,
    InvalidStatusTransition,
    NotFoundError,
    PromotionError,
    ValidationError,
)
from compliance_hub.api import auth, compliance_rules, countries, submissions

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# Service errors and the HTTP status they map to; unlisted subclasses get 500
ERROR_STATUS_CODES = {
    NotFoundError: 404,
    ValidationError: 400,
    ImportFileError: 400,
    InvalidStatusTransition: 409,
    PromotionError: 500,
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    logger.info(f"{settings.api_title} started ({settings.environment})")
    yield


app = FastAPI(
    title=settings.api_title,
    version=settings.api_version,
    description="Compliance Hub - regulatory obligations by country and company type",
    lifespan=lifespan,
)

# CORS middleware for React frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ComplianceHubError)
async def compliance_hub_error_handler(request: Request, exc: ComplianceHubError):
    status_code = 500
    for error_class, code in ERROR_STATUS_CODES.items():
        if isinstance(exc, error_class):
            status_code = code
            break

    if status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=status_code, content={"detail": exc.message})


# Include routers
app.include_router(auth.router)
app.include_router(compliance_rules.router)
app.include_router(countries.router)
app.include_router(submissions.router)


@app.get("/routes-simple", response_class=PlainTextResponse)
async def get_routes_simple():
    """
    Returns a concise list of all routes with their paths and methods.
    """
    routes = []
    for route in app.routes:
        if isinstance(route, APIRoute):
            methods = ", ".join(sorted(route.methods))
            routes.append(f"{methods}: {route.path}")

    return "\n".join(routes)


@app.get("/")
async def root():
    return {
        "message": "Compliance Hub API",
        "version": settings.api_version,
        "status": "running",
    }


@app.get("/health")
async def health_check():
    return {"status": "healthy"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
