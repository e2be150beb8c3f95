import asyncio
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from shortlink_app.config import settings
from shortlink_app.api.v1 import urls, redirect
from shortlink_app.dependencies import get_app_logger, get_log_queue, get_log_sink
from shortlink_app.exceptions import ShortenerError
from shortlink_app.log_processor.log_worker import LogWorker
from shortlink_app.schemas.url import HealthResponse
from shortlink_app.utils.clock import utc_now, to_iso


def _app_logger():
    """The logger routes see, honouring dependency overrides (tests)"""
    provider = app.dependency_overrides.get(get_app_logger, get_app_logger)
    return provider()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Run the log worker alongside the API and drain it on shutdown"""
    worker = None
    task = None
    if settings.run_log_worker:
        worker = LogWorker(
            queue=get_log_queue(),
            sink=get_log_sink(),
            queue_name=settings.queue_name,
            batch_size=settings.queue_batch_size
        )
        task = asyncio.create_task(worker.start())
    app.state.log_worker = worker

    await get_app_logger().info("service", f"Server started on {settings.base_url}")
    print(f"Server running on {settings.base_url}")

    yield

    await get_app_logger().info("service", "Server shutting down gracefully")
    if worker is not None:
        worker.stop()
        try:
            await asyncio.wait_for(task, timeout=settings.log_timeout * 2)
        except asyncio.TimeoutError:
            print("⚠️  Log worker did not finish draining in time")


# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="A URL shortener with click tracking built with FastAPI",
    debug=settings.debug,
    lifespan=lifespan
)


@app.exception_handler(ShortenerError)
async def shortener_error_handler(request: Request, exc: ShortenerError):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    """Malformed request bodies are client errors (400), as is any bad input"""
    errors = exc.errors()
    detail = errors[0].get("msg", "Invalid request") if errors else "Invalid request"
    await _app_logger().warn("handler", f"{request.method} {request.url.path}: {detail}")
    return JSONResponse(status_code=400, content={"error": detail})


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == 404:
        await _app_logger().warn("route", f"404 - Route not found: {request.method} {request.url.path}")
        return JSONResponse(status_code=404, content={"error": "Route not found"})
    return JSONResponse(status_code=exc.status_code, content={"error": exc.detail})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    await _app_logger().error("middleware", f"Unhandled error: {exc}")
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


@app.get("/")
def read_root():
    """Root endpoint with API information"""
    return {
        "message": f"Welcome to {settings.app_name}",
        "version": settings.app_version,
        "docs": "/docs",
        "redoc": "/redoc"
    }


@app.get("/health", response_model=HealthResponse)
async def health_check():
    """Liveness probe; does not touch the stores"""
    await _app_logger().info("route", "Health check endpoint accessed")
    return HealthResponse(status="OK", timestamp=to_iso(utc_now()))


######## Include routers
# The redirect router's catch-all /{shortcode} must come last
app.include_router(urls.router)
app.include_router(redirect.router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host=settings.host, port=settings.port)
