from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from core.config import settings
from core.errors import AppError
from core.logging_config import logger
from qa_services.documents import NO_FILE_MESSAGE


def _validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    return f"{location}: {first.get('msg')}" if location else str(first.get("msg"))


def create_app() -> FastAPI:
    application = FastAPI(
        title="PDF Ask API",
        description="Upload a PDF and ask questions about its text",
        version="1.0.0",
    )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Every non-200 response carries {"error": message}
    @application.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @application.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)})

    @application.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        # A `pdf` form field that is not a file counts as no file at all
        if any(tuple(err.get("loc", ()))[:2] == ("body", "pdf") for err in exc.errors()):
            return JSONResponse(status_code=500, content={"error": NO_FILE_MESSAGE})
        return JSONResponse(status_code=400, content={"error": _validation_message(exc)})

    @application.on_event("startup")
    async def startup_event():
        logger.info("Server is running on http://%s:%s", settings.HOST, settings.PORT)
        logger.info("Storing documents under %s", settings.DATA_DIR)

    # Routers are imported lazily to avoid circular deps during app creation
    from routers.documents import router as documents_router

    application.include_router(documents_router, tags=["documents"])

    return application


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host=settings.HOST, port=settings.PORT)
