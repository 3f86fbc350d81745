import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .error import ClientError, ServerError

logger = logging.getLogger(__name__)

# Status -> envelope code for errors raised outside the use cases
HTTP_ERROR_CODES = {
    status.HTTP_401_UNAUTHORIZED: "AUTHENTICATION_FAILED",
    status.HTTP_403_FORBIDDEN: "FORBIDDEN",
    status.HTTP_404_NOT_FOUND: "NOT_FOUND",
    status.HTTP_405_METHOD_NOT_ALLOWED: "METHOD_NOT_ALLOWED",
}


def error_response(status_code: int, code: str, message: str, headers=None) -> JSONResponse:
    """Every error body has the shape {"error": {"code", "message"}}"""
    return JSONResponse(
        status_code=status_code,
        content={"error": {"code": code, "message": message}},
        headers=headers,
    )


def _describe_validation(exc: RequestValidationError) -> str:
    problems = []
    for err in exc.errors():
        location = ".".join(str(part) for part in err.get("loc", ()) if part != "body")
        problems.append(f"{location}: {err.get('msg')}" if location else err.get("msg"))
    return "; ".join(problems) or "Invalid request"


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(ClientError)
    async def handle_client_error(request: Request, exc: ClientError):
        logger.warning(
            f"Client error on {request.method} {request.url.path}: {exc.base_error.code}"
        )
        return error_response(exc.status_code, exc.base_error.code, exc.base_error.message)

    @app.exception_handler(ServerError)
    async def handle_server_error(request: Request, exc: ServerError):
        # Internal details stay in the log
        logger.error(
            f"Server error on {request.method} {request.url.path}: "
            f"{exc.base_error.code} {exc.base_error.message}"
        )
        return error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            exc.base_error.code,
            "Internal server error",
        )

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError):
        message = _describe_validation(exc)
        logger.info(f"Rejected request on {request.method} {request.url.path}: {message}")
        return error_response(
            status.HTTP_422_UNPROCESSABLE_ENTITY, "VALIDATION_ERROR", message
        )

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        code = HTTP_ERROR_CODES.get(exc.status_code, "HTTP_ERROR")
        if exc.status_code >= 500:
            logger.error(f"HTTP {exc.status_code} on {request.method} {request.url.path}")
        else:
            logger.warning(
                f"HTTP {exc.status_code} on {request.method} {request.url.path}: {exc.detail}"
            )
        return error_response(
            exc.status_code, code, str(exc.detail), headers=getattr(exc, "headers", None)
        )


def create_app(ApplicationConfig) -> FastAPI:
    app = FastAPI(title="Caster Auth API", version="0.1.0")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ApplicationConfig.CORS_ORIGINS,
        allow_credentials=ApplicationConfig.CORS_ALLOW_CREDENTIALS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    from src.api.routes import admin, auth, two_factor

    app.include_router(auth.router, tags=["Authentication"])
    app.include_router(two_factor.router, tags=["Two-Factor"])
    app.include_router(admin.router, tags=["Admin"])

    register_exception_handlers(app)

    return app
