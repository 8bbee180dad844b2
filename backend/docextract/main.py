import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from docextract.api.v1.diagnostics import router as diagnostics_router
from docextract.api.v1.extraction import router as extraction_router
from docextract.core.config import get_settings
from docextract.services.ai.common.errors import ExtractionError
from docextract.services.ai.operations import get_registry

settings = get_settings()

logger = logging.getLogger(__name__)

app = FastAPI(
    title="docextract API",
    version="1.0.0",
    docs_url="/docs" if settings.docs_enabled else None,
    openapi_url="/openapi.json" if settings.openapi_enabled else None,
)


@app.on_event("startup")
async def _build_registry():
    registry = get_registry()
    logger.info("Registered %d extraction operations", len(registry))


if settings.cors_allow_origins:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=True,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
    )

app.include_router(extraction_router, prefix="/api/v1", tags=["extraction"])
app.include_router(diagnostics_router, prefix="/api/v1", tags=["diagnostics"])


@app.get("/health")
async def health():
    return {"status": "ok"}


@app.exception_handler(ExtractionError)
async def _extraction_error_handler(request: Request, exc: ExtractionError):
    body = {"error": exc.public_message, "stage": exc.stage}
    if settings.expose_error_details and exc.status_code >= 500:
        body["detail"] = str(exc.cause)
    return JSONResponse(status_code=exc.status_code, content=body)


@app.exception_handler(RequestValidationError)
async def _request_validation_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(status_code=400, content={"error": "Invalid request", "stage": "input"})


@app.exception_handler(StarletteHTTPException)
async def _http_exception_handler(request: Request, exc: StarletteHTTPException):
    # Hide internal details for 5xx in production unless explicitly enabled.
    if exc.status_code >= 500 and not settings.expose_error_details:
        return JSONResponse(status_code=exc.status_code, content={"error": "Internal server error"})
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)})


@app.exception_handler(Exception)
async def _unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled exception")
    if settings.expose_error_details:
        return JSONResponse(status_code=500, content={"error": str(exc)})
    return JSONResponse(status_code=500, content={"error": "Internal server error"})
