"""Exception handlers that render every failure as {"success": false, "message": ...}."""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from shared.helper.errors import AppError


def error_envelope(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "message": message})


def register_error_handlers(app: FastAPI) -> None:
    """Attach the envelope-producing exception handlers to an app."""

    @app.exception_handler(AppError)
    async def handle_app_error(request: Request, exc: AppError) -> JSONResponse:
        if exc.status_code >= 500:
            request.app.state.logging.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        return error_envelope(exc.status_code, exc.message)

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        first = exc.errors()[0] if exc.errors() else {}
        field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{field}: {first.get('msg')}" if field else str(first.get("msg", "Invalid request"))
        return error_envelope(400, message)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
        request.app.state.logging.exception("Unhandled error on %s %s", request.method, request.url.path)
        return error_envelope(500, "Internal server error")
