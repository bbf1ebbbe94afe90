from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import time
import logging

from rumbo.config.settings import settings
from rumbo.core.exceptions import (
    RumboError, InputValidationError, InvalidTransitionError, UniquenessConflictError
)
from rumbo.shared.schemas.common import ErrorResponse, ValidationErrorResponse, Violation

logger = logging.getLogger(__name__)

def setup_middleware(app: FastAPI):
    """Configure all middleware for the application"""

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request, call_next):
        start_time = time.time()

        response = await call_next(request)

        process_time = time.time() - start_time
        logger.info(
            f"{request.method} {request.url.path} - "
            f"Status: {response.status_code} - "
            f"Time: {process_time:.4f}s"
        )

        return response

def setup_exception_handlers(app: FastAPI):
    """Serializar los errores tipados como ErrorResponse"""

    @app.exception_handler(RumboError)
    async def rumbo_error_handler(request: Request, exc: RumboError):
        if isinstance(exc, InputValidationError):
            body = ValidationErrorResponse(
                message=exc.detail,
                violations=exc.violations,
            )
        else:
            details = None
            if isinstance(exc, InvalidTransitionError):
                details = {"current": exc.current, "requested": exc.requested}
            elif isinstance(exc, UniquenessConflictError) and exc.field:
                details = {"field": exc.field}
            body = ErrorResponse(
                message=exc.detail,
                error_code=exc.error_code,
                details=details,
            )
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} - {exc.error_code}: {exc.detail}")
        return JSONResponse(status_code=exc.status_code, content=jsonable_encoder(body))

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        """Errores detectados por FastAPI antes del servicio (cuerpo, path, query)"""
        violations = []
        for error in exc.errors():
            loc = list(error.get("loc", ()))
            if loc and loc[0] == "body":
                loc = loc[1:]
            violations.append(Violation(
                field=".".join(str(part) for part in loc),
                message=error.get("msg", "Valor inválido")
            ))
        body = ValidationErrorResponse(message="Datos inválidos", violations=violations)
        return JSONResponse(status_code=422, content=jsonable_encoder(body))
