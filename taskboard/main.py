import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from taskboard.config import settings
from taskboard.database import Database
from taskboard.routers.health import router as health_router
from taskboard.routers.users import router as users_router
from taskboard.routers.tasks import router as tasks_router
from taskboard.routers.stats import router as stats_router
from taskboard.utils.locking import host_lock
from taskboard.utils.logging import setup_logging

setup_logging(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

ROUTE_NOT_FOUND = "Route not found"


@asynccontextmanager
async def lifespan(app: FastAPI):
    database = Database(settings.sqlalchemy_url)
    app.state.database = database
    if settings.DB_CREATE_TABLES:
        # One worker at a time; later ones find the tables and skip CREATE
        with host_lock(settings.SCHEMA_LOCK_FILE):
            await database.create_all()
    logger.info("Using database %s", database.engine.url.render_as_string(hide_password=True))

    yield

    # In-flight requests are not drained beyond what the server does
    logger.info("Shutting down, closing database connections")
    await database.dispose()


app = FastAPI(
    lifespan=lifespan,
    title="Task API",
    description="Users and tasks CRUD API with task statistics",
    version=settings.APP_VERSION,
)

# Enable CORS for the frontend
app.add_middleware(
    CORSMiddleware,
    allow_origin_regex=settings.CORS_ORIGIN_REGEX,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def validation_message(exc: RequestValidationError) -> str:
    """First validation error as one readable sentence naming the field."""
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    error = errors[0]
    if error.get("type") == "json_invalid":
        return "Invalid JSON body"

    message = error.get("msg", "Invalid request").removeprefix("Value error, ")
    field = ".".join(str(part) for part in error.get("loc", ())[1:])
    if error.get("type") == "missing" and not field:
        return "Request body is required"
    if error.get("type") == "value_error" or not field:
        return message
    return f"{field}: {message}"


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(status_code=400, content={"error": validation_message(exc)})


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content={"error": "Something went wrong!"})


app.include_router(health_router)
app.include_router(users_router)
app.include_router(tasks_router)
app.include_router(stats_router)


@app.get("/")
def root():
    return {"message": "Task API running"}


# Registered last so every real route matches first
@app.api_route("/{path:path}", methods=["GET", "POST", "PUT", "PATCH", "DELETE"], include_in_schema=False)
async def route_not_found(path: str):
    return JSONResponse(status_code=404, content={"error": ROUTE_NOT_FOUND})


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("taskboard.main:app", host=settings.HOST, port=settings.PORT)
